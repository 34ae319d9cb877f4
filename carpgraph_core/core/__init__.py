from .batch import BatchResult, render_many
from .commands import (
    COLOR,
    COMMAND_TABLE,
    END_OF_HEADER,
    EOF,
    LINE,
    POINT,
    SIZE,
    Command,
    CommandKind,
    CommandSpec,
)
from .config import CONFIG_ENV_VAR, CodecConfig, load_config, resolve_config
from .errors import (
    CarpGraphError,
    CommandPayloadError,
    ConfigError,
    DecodeError,
    InvalidUtf8Color,
    LegacyFormatError,
    MalformedHeader,
    MediaError,
    TruncatedPayload,
)
from .graph import LENIENT, STRICT, DecodePolicy, Graph, decode, encode
from .header import DEFAULT_TAG, DEFAULT_VERSION, HEADER_LENGTH, GraphHeader, parse_header
from .protocol_governance import (
    CURRENT_FORMAT_VERSION,
    DEPRECATED_FORMAT_VERSIONS,
    FORMAT_TAG,
    SUPPORTED_FORMAT_VERSIONS,
    FormatCompatibility,
    check_format_compatibility,
)
from .scanner import ScanReport, ScanStep, iter_commands, read_command

__all__ = [
    "BatchResult",
    "COLOR",
    "COMMAND_TABLE",
    "CONFIG_ENV_VAR",
    "CURRENT_FORMAT_VERSION",
    "CarpGraphError",
    "CodecConfig",
    "Command",
    "CommandKind",
    "CommandPayloadError",
    "CommandSpec",
    "ConfigError",
    "DEFAULT_TAG",
    "DEFAULT_VERSION",
    "DEPRECATED_FORMAT_VERSIONS",
    "DecodeError",
    "DecodePolicy",
    "END_OF_HEADER",
    "EOF",
    "FORMAT_TAG",
    "FormatCompatibility",
    "Graph",
    "GraphHeader",
    "HEADER_LENGTH",
    "InvalidUtf8Color",
    "LENIENT",
    "LINE",
    "LegacyFormatError",
    "MalformedHeader",
    "MediaError",
    "POINT",
    "SIZE",
    "STRICT",
    "SUPPORTED_FORMAT_VERSIONS",
    "ScanReport",
    "ScanStep",
    "TruncatedPayload",
    "check_format_compatibility",
    "decode",
    "encode",
    "iter_commands",
    "load_config",
    "parse_header",
    "read_command",
    "render_many",
    "resolve_config",
]
