from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import TYPE_CHECKING, Iterable

from .commands import EOF, Command, CommandKind
from .errors import CommandPayloadError, InvalidUtf8Color
from .header import DEFAULT_TAG, DEFAULT_VERSION, HEADER_LENGTH, GraphHeader, parse_header
from .protocol_governance import check_format_compatibility
from .scanner import ScanReport, iter_commands

if TYPE_CHECKING:
    from carpgraph_core.render.svg import VectorScene

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class DecodePolicy:
    accept_truncated: bool = False
    require_utf8_colors: bool = False


STRICT = DecodePolicy()
LENIENT = DecodePolicy(accept_truncated=True)


@dataclass(frozen=True)
class Graph:
    """A CarpGraph image: header bytes, canvas size and an ordered command stream."""

    header: bytes = DEFAULT_TAG + DEFAULT_VERSION
    dimensions: tuple[int, int] = (0, 0)
    commands: tuple[Command, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        header = bytes(self.header)
        if len(header) != 4:
            raise ValueError(f"graph header must be 4 bytes (tag + version), got {len(header)}")
        width, height = self.dimensions
        # Validates the u32 range for both sides.
        GraphHeader(tag=header[0:2], version=header[2:4], width=int(width), height=int(height))
        commands = tuple(self.commands)
        for command in commands:
            if not isinstance(command, Command):
                raise TypeError(f"graph commands must be Command instances, got {type(command)!r}")
        # A truncated payload runs to the end of the buffer, so nothing may follow it.
        for index, command in enumerate(commands[:-1]):
            if not command.complete:
                raise CommandPayloadError(
                    f"truncated {command.kind.name} command at index {index} must be the last command"
                )
        object.__setattr__(self, "header", header)
        object.__setattr__(self, "dimensions", (int(width), int(height)))
        object.__setattr__(self, "commands", commands)

    @classmethod
    def new(
        cls,
        width: int,
        height: int,
        commands: Iterable[Command] = (),
        *,
        tag: bytes = DEFAULT_TAG,
        version: bytes = DEFAULT_VERSION,
    ) -> "Graph":
        return cls(header=tag + version, dimensions=(width, height), commands=tuple(commands))

    @classmethod
    def from_bytes(cls, buffer: bytes, policy: DecodePolicy = STRICT) -> "Graph":
        return decode(buffer, policy=policy)

    @property
    def tag(self) -> bytes:
        return self.header[0:2]

    @property
    def version(self) -> bytes:
        return self.header[2:4]

    @property
    def width(self) -> int:
        return self.dimensions[0]

    @property
    def height(self) -> int:
        return self.dimensions[1]

    def header_fields(self) -> GraphHeader:
        return GraphHeader(tag=self.tag, version=self.version, width=self.width, height=self.height)

    def to_bytes(self) -> bytes:
        return encode(self)

    def to_vector(self, *, background: str = "white") -> "VectorScene":
        from carpgraph_core.render.svg import render_to_vector

        return render_to_vector(self, background=background)

    def to_svg(self, *, background: str = "white") -> str:
        return self.to_vector(background=background).to_markup()

    def count_commands(self) -> dict[str, int]:
        counts = {kind.name: 0 for kind in CommandKind}
        for command in self.commands:
            counts[command.kind.name] += 1
        return counts


def encode(graph: Graph) -> bytes:
    out = bytearray(graph.header_fields().pack())
    for command in graph.commands:
        out += command.to_bytes()
    if not graph.commands or graph.commands[-1].complete:
        out.append(EOF)
    return bytes(out)


def decode(buffer: bytes, *, policy: DecodePolicy = STRICT) -> Graph:
    data = bytes(buffer)
    header = parse_header(data)
    compatibility = check_format_compatibility(header.tag, header.version)
    if not compatibility.accepted:
        LOGGER.warning("decoding graph with %s", compatibility.warning)
    elif compatibility.warning is not None:
        LOGGER.info(compatibility.warning)

    report = ScanReport(skipped_offsets=[])
    commands = tuple(
        iter_commands(data, HEADER_LENGTH, accept_truncated=policy.accept_truncated, report=report)
    )
    if report.skipped_offsets:
        LOGGER.warning("graph decode skipped extraneous bytes; count=%d", len(report.skipped_offsets))
    if not report.terminated:
        LOGGER.debug("graph buffer ended without EOF marker; length=%d", len(data))
    if policy.require_utf8_colors:
        for command in commands:
            if command.kind is CommandKind.COLOR:
                _check_utf8_color(command)

    return Graph(
        header=header.preamble,
        dimensions=(header.width, header.height),
        commands=commands,
    )


def _check_utf8_color(command: Command) -> None:
    try:
        command.data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise InvalidUtf8Color(f"color payload is not valid utf-8: {command.data!r}") from exc

