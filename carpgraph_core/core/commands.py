from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
import string

from .errors import CommandPayloadError, InvalidUtf8Color


END_OF_HEADER = 0x1A
EOF = 0x1F

U16_MAX = 0xFFFF
U32_MAX = 0xFFFFFFFF

_HEX_DIGITS = frozenset(string.hexdigits)


@dataclass(frozen=True)
class CommandSpec:
    tag: int
    payload_length: int


class CommandKind(Enum):
    """Draw commands that may appear in the body of a graph.

    Each member is the single table entry for its wire tag and payload size.
    """

    COLOR = CommandSpec(tag=0x1B, payload_length=6)
    SIZE = CommandSpec(tag=0x2B, payload_length=2)
    LINE = CommandSpec(tag=0x3B, payload_length=0)
    POINT = CommandSpec(tag=0x4B, payload_length=8)

    @property
    def tag(self) -> int:
        return self.value.tag

    @property
    def payload_length(self) -> int:
        return self.value.payload_length

    @classmethod
    def from_tag(cls, tag: int) -> "CommandKind | None":
        return COMMAND_TABLE.get(tag)


COLOR = CommandKind.COLOR.tag
SIZE = CommandKind.SIZE.tag
LINE = CommandKind.LINE.tag
POINT = CommandKind.POINT.tag

COMMAND_TABLE: dict[int, CommandKind] = {kind.tag: kind for kind in CommandKind}


@dataclass(frozen=True)
class Command:
    kind: CommandKind
    data: bytes = b""
    complete: bool = field(default=True)

    def __post_init__(self) -> None:
        if not isinstance(self.kind, CommandKind):
            raise CommandPayloadError(f"unsupported command kind: {self.kind!r}")
        data = bytes(self.data)
        object.__setattr__(self, "data", data)
        expected = self.kind.payload_length
        if self.complete and len(data) != expected:
            raise CommandPayloadError(
                f"{self.kind.name} payload must be {expected} bytes, got {len(data)}"
            )
        if not self.complete and len(data) >= expected:
            raise CommandPayloadError(
                f"truncated {self.kind.name} payload must be shorter than {expected} bytes"
            )

    @classmethod
    def truncated(cls, kind: CommandKind, data: bytes) -> "Command":
        """Command whose payload was cut short by the end of the buffer."""
        return cls(kind=kind, data=data, complete=False)

    @classmethod
    def color(cls, hex_color: str) -> "Command":
        text = hex_color[1:] if hex_color.startswith("#") else hex_color
        if len(text) != 6 or not all(ch in _HEX_DIGITS for ch in text):
            raise CommandPayloadError(f"color must be 6 hex digits, got {hex_color!r}")
        return cls(kind=CommandKind.COLOR, data=text.encode("ascii"))

    @classmethod
    def size(cls, diameter: int) -> "Command":
        if diameter < 0 or diameter > U16_MAX:
            raise CommandPayloadError(f"size out of range: {diameter}")
        return cls(kind=CommandKind.SIZE, data=int(diameter).to_bytes(2, "big"))

    @classmethod
    def line(cls) -> "Command":
        return cls(kind=CommandKind.LINE)

    @classmethod
    def point(cls, x: int, y: int) -> "Command":
        if not (0 <= x <= U32_MAX and 0 <= y <= U32_MAX):
            raise CommandPayloadError(f"point out of range: ({x}, {y})")
        return cls(kind=CommandKind.POINT, data=int(x).to_bytes(4, "big") + int(y).to_bytes(4, "big"))

    def color_text(self) -> str:
        self._require(CommandKind.COLOR)
        try:
            return self.data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidUtf8Color(f"color payload is not valid utf-8: {self.data!r}") from exc

    def size_value(self) -> int:
        self._require(CommandKind.SIZE)
        return int.from_bytes(self.data, "big")

    def point_value(self) -> tuple[int, int]:
        self._require(CommandKind.POINT)
        return int.from_bytes(self.data[0:4], "big"), int.from_bytes(self.data[4:8], "big")

    def to_bytes(self) -> bytes:
        return bytes((self.kind.tag,)) + self.data

    def _require(self, kind: CommandKind) -> None:
        if self.kind is not kind:
            raise CommandPayloadError(f"expected {kind.name} command, got {self.kind.name}")
        if not self.complete:
            raise CommandPayloadError(f"{kind.name} payload is truncated")
