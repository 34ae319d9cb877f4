from __future__ import annotations

import math

from carpgraph_core.core.commands import Command, CommandKind
from carpgraph_core.core.graph import Graph
from carpgraph_core.core.header import DEFAULT_TAG, DEFAULT_VERSION


class GraphBuilder:
    """Accumulates pen input into a command stream, one stroke at a time.

    ``draw`` records into a pending stroke; ``push_state`` commits it as its
    points followed by a LINE marker. A brush change is written just before
    the next point, and only when it differs from what the stream last carried.
    """

    def __init__(
        self,
        width: int = 300,
        height: int = 200,
        *,
        stroke_size: int = 2,
        color: str = "000000",
        tag: bytes = DEFAULT_TAG,
        version: bytes = DEFAULT_VERSION,
    ) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("width and height must be > 0")
        self.width = width
        self.height = height
        self._tag = tag
        self._version = version
        self._commands: list[Command] = []
        self._pending: list[Command] = []
        self._pos = (0, 0)
        self._color_cmd = Command.color(color)
        self._size_cmd = Command.size(stroke_size)
        # Renderer defaults; a stream that never sets a style inherits these.
        self._written_color = Command.color("000000")
        self._written_size = Command.size(2)

    @property
    def color(self) -> str:
        return self._color_cmd.color_text()

    @property
    def stroke_size(self) -> int:
        return self._size_cmd.size_value()

    @property
    def position(self) -> tuple[int, int]:
        return self._pos

    @property
    def pending_points(self) -> list[tuple[int, int]]:
        return [cmd.point_value() for cmd in self._pending if cmd.kind is CommandKind.POINT]

    def set_color(self, color: str) -> None:
        self._color_cmd = Command.color(color)

    def set_size(self, stroke_size: int) -> None:
        self._size_cmd = Command.size(stroke_size)

    def move(self, x: float, y: float) -> None:
        self._pos = (_floor(x), _floor(y))

    def draw(self, x: float, y: float) -> None:
        self.move(x, y)
        self._sync_style()
        self._pending.append(Command.point(*self._pos))

    def push_state(self) -> None:
        if not self._pending:
            return
        self._commands.extend(self._pending)
        self._commands.append(Command.line())
        self._pending = []

    def _sync_style(self) -> None:
        if self._color_cmd != self._written_color:
            self._pending.append(self._color_cmd)
            self._written_color = self._color_cmd
        if self._size_cmd != self._written_size:
            self._pending.append(self._size_cmd)
            self._written_size = self._size_cmd

    def stroke(self, points: list[tuple[float, float]]) -> None:
        for x, y in points:
            self.draw(x, y)
        self.push_state()

    def build(self) -> Graph:
        self.push_state()
        return Graph.new(
            self.width,
            self.height,
            self._commands,
            tag=self._tag,
            version=self._version,
        )


def _floor(value: float) -> int:
    out = int(math.floor(value))
    return max(0, out)
