from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Iterator

from .commands import EOF, Command, CommandKind
from .errors import TruncatedPayload

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScanStep:
    command: Command | None
    next_offset: int
    stop: bool = False
    skipped: bool = False


def read_command(buffer: bytes, offset: int, *, accept_truncated: bool = False) -> ScanStep:
    """Read one body item starting at ``offset``.

    Returns a stop step at EOF or at the end of the buffer, and a skipped step
    for an unrecognised tag byte.
    """
    if offset >= len(buffer):
        return ScanStep(command=None, next_offset=offset, stop=True)
    tag = buffer[offset]
    if tag == EOF:
        return ScanStep(command=None, next_offset=offset + 1, stop=True)
    kind = CommandKind.from_tag(tag)
    if kind is None:
        return ScanStep(command=None, next_offset=offset + 1, skipped=True)

    start = offset + 1
    stop = start + kind.payload_length
    payload = bytes(buffer[start:stop])
    if len(payload) < kind.payload_length:
        if not accept_truncated:
            raise TruncatedPayload(kind.name, offset, kind.payload_length, len(payload))
        return ScanStep(command=Command.truncated(kind, payload), next_offset=len(buffer), stop=True)
    return ScanStep(command=Command(kind=kind, data=payload), next_offset=stop)


@dataclass
class ScanReport:
    skipped_offsets: list[int]
    terminated: bool = False


def iter_commands(
    buffer: bytes,
    start: int,
    *,
    accept_truncated: bool = False,
    report: ScanReport | None = None,
) -> Iterator[Command]:
    offset = start
    while True:
        step = read_command(buffer, offset, accept_truncated=accept_truncated)
        if step.skipped:
            LOGGER.debug("extraneous byte 0x%02x at offset %d", buffer[offset], offset)
            if report is not None:
                report.skipped_offsets.append(offset)
        if step.command is not None:
            yield step.command
        if step.stop:
            if report is not None:
                report.terminated = step.next_offset > offset and step.command is None
            return
        offset = step.next_offset
