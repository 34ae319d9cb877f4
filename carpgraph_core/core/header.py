from __future__ import annotations

from dataclasses import dataclass

from .commands import END_OF_HEADER, U32_MAX
from .errors import MalformedHeader


DEFAULT_TAG = b"CG"
DEFAULT_VERSION = b"\x00\x01"

TAG_RANGE = (0, 2)
VERSION_RANGE = (2, 4)
WIDTH_RANGE = (4, 8)
HEIGHT_RANGE = (8, 12)
END_OF_HEADER_INDEX = 12
HEADER_LENGTH = 13


@dataclass(frozen=True)
class GraphHeader:
    """Fixed 13-byte preamble: tag, version, width, height, END_OF_HEADER."""

    tag: bytes = DEFAULT_TAG
    version: bytes = DEFAULT_VERSION
    width: int = 0
    height: int = 0

    def __post_init__(self) -> None:
        if len(self.tag) != 2:
            raise ValueError(f"header tag must be 2 bytes, got {len(self.tag)}")
        if len(self.version) != 2:
            raise ValueError(f"header version must be 2 bytes, got {len(self.version)}")
        _validate_u32(self.width, "width")
        _validate_u32(self.height, "height")

    @property
    def preamble(self) -> bytes:
        return self.tag + self.version

    def pack(self) -> bytes:
        return (
            self.tag
            + self.version
            + self.width.to_bytes(4, "big")
            + self.height.to_bytes(4, "big")
            + bytes((END_OF_HEADER,))
        )


def parse_header(buffer: bytes) -> GraphHeader:
    if len(buffer) < HEADER_LENGTH:
        raise MalformedHeader(f"buffer too short for header: {len(buffer)} < {HEADER_LENGTH} bytes")
    marker = buffer[END_OF_HEADER_INDEX]
    if marker != END_OF_HEADER:
        raise MalformedHeader(
            f"expected END_OF_HEADER 0x{END_OF_HEADER:02x} at offset {END_OF_HEADER_INDEX}, got 0x{marker:02x}"
        )
    return GraphHeader(
        tag=_slice(buffer, TAG_RANGE),
        version=_slice(buffer, VERSION_RANGE),
        width=_read_u32(buffer, WIDTH_RANGE),
        height=_read_u32(buffer, HEIGHT_RANGE),
    )


def _slice(buffer: bytes, byte_range: tuple[int, int]) -> bytes:
    start, stop = byte_range
    return bytes(buffer[start:stop])


def _read_u32(buffer: bytes, byte_range: tuple[int, int]) -> int:
    return int.from_bytes(_slice(buffer, byte_range), "big")


def _validate_u32(value: int, label: str) -> None:
    if value < 0 or value > U32_MAX:
        raise ValueError(f"{label} out of u32 range: {value}")
