from .core import (
    CarpGraphError,
    CodecConfig,
    Command,
    CommandKind,
    DecodeError,
    DecodePolicy,
    Graph,
    LENIENT,
    STRICT,
    decode,
    encode,
)
from .render import render_to_vector

__all__ = [
    "CarpGraphError",
    "CodecConfig",
    "Command",
    "CommandKind",
    "DecodeError",
    "DecodePolicy",
    "Graph",
    "LENIENT",
    "STRICT",
    "decode",
    "encode",
    "render_to_vector",
]
