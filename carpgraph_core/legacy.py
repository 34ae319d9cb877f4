"""Format 1 drawings: JSON lists of lines, each a list of ``[x, y, brush?]`` points.

These predate the binary command stream and still turn up in stored media.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import json
from typing import Any, Optional
import xml.etree.ElementTree as ET

from carpgraph_core.core.errors import CommandPayloadError, LegacyFormatError
from carpgraph_core.core.graph import Graph
from carpgraph_core.draw.builder import GraphBuilder
from carpgraph_core.render.svg import SVG_NAMESPACE


@dataclass(frozen=True)
class LegacyPoint:
    x: int
    y: int
    brush: Optional[str] = None


@dataclass
class LegacyGraph:
    width: int
    height: int
    lines: list[list[LegacyPoint]] = field(default_factory=list)

    @classmethod
    def from_json(cls, text: str) -> "LegacyGraph":
        raw = _load_json(text)
        if not isinstance(raw, dict):
            raise LegacyFormatError("legacy graph must be a JSON object")
        image = _pick(raw, "image", "i")
        if not isinstance(image, dict):
            raise LegacyFormatError("legacy graph image config must be an object")
        width = _coerce_dimension(_pick(image, "width", "w"), "width")
        height = _coerce_dimension(_pick(image, "height", "h"), "height")
        return cls(width=width, height=height, lines=_parse_lines(_pick(raw, "data", "d")))

    @classmethod
    def from_lines_json(cls, text: str, width: int = 300, height: int = 200) -> "LegacyGraph":
        return cls(width=width, height=height, lines=_parse_lines(_load_json(text)))

    def to_json(self) -> str:
        data = [
            [[p.x, p.y] if p.brush is None else [p.x, p.y, p.brush] for p in line]
            for line in self.lines
        ]
        return json.dumps({"i": {"w": self.width, "h": self.height}, "d": data}, separators=(",", ":"))

    def to_svg(self) -> str:
        root = ET.Element(
            "svg",
            {
                "viewBox": f"0 0 {self.width} {self.height}",
                "xmlns": SVG_NAMESPACE,
                "style": f"background: white; width: {self.width}px; height: {self.height}px",
                "class": "carpgraph",
            },
        )
        stroke_size = 1
        stroke_color = "#000000"
        for line in self.lines:
            previous: Optional[tuple[int, int]] = None
            path: list[str] = []
            for point in line:
                if point.brush is not None:
                    if point.brush.startswith("#"):
                        stroke_color = point.brush
                    else:
                        stroke_size = _parse_brush_size(point.brush)
                if previous is None:
                    path.append(f"M{point.x} {point.y}")
                else:
                    path.append(f"M{point.x} {point.y} L{previous[0]} {previous[1]}")
                previous = (point.x, point.y)
                ET.SubElement(
                    root,
                    "circle",
                    {"cx": str(point.x), "cy": str(point.y), "r": str(stroke_size // 2), "fill": stroke_color},
                )
            ET.SubElement(
                root,
                "path",
                {"d": " ".join(path), "stroke": stroke_color, "stroke-width": str(stroke_size)},
            )
        return ET.tostring(root, encoding="unicode")

    def to_graph(self) -> Graph:
        builder = GraphBuilder(self.width, self.height, stroke_size=1)
        for line in self.lines:
            for point in line:
                if point.brush is not None:
                    _apply_brush(builder, point.brush)
                builder.draw(point.x, point.y)
            builder.push_state()
        return builder.build()


def _load_json(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise LegacyFormatError(f"legacy graph is not valid JSON: {exc}") from exc


def _pick(raw: dict[str, Any], name: str, alias: str) -> Any:
    if name in raw:
        return raw[name]
    if alias in raw:
        return raw[alias]
    raise LegacyFormatError(f"legacy graph missing field: {name}")


def _coerce_dimension(value: Any, label: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise LegacyFormatError(f"legacy graph {label} must be a non-negative integer")
    return value


def _parse_lines(raw: Any) -> list[list[LegacyPoint]]:
    if not isinstance(raw, list):
        raise LegacyFormatError("legacy graph data must be a list of lines")
    lines: list[list[LegacyPoint]] = []
    for line in raw:
        if not isinstance(line, list):
            raise LegacyFormatError("legacy graph line must be a list of points")
        lines.append([_parse_point(point) for point in line])
    return lines


def _parse_point(raw: Any) -> LegacyPoint:
    if not isinstance(raw, list) or len(raw) not in (2, 3):
        raise LegacyFormatError(f"legacy point must be [x, y] or [x, y, brush], got {raw!r}")
    x, y = raw[0], raw[1]
    if isinstance(x, bool) or isinstance(y, bool) or not isinstance(x, (int, float)) or not isinstance(y, (int, float)):
        raise LegacyFormatError(f"legacy point coordinates must be numbers, got {raw!r}")
    if x < 0 or y < 0:
        raise LegacyFormatError(f"legacy point coordinates must be >= 0, got {raw!r}")
    brush = raw[2] if len(raw) == 3 else None
    if brush is not None and not isinstance(brush, str):
        raise LegacyFormatError(f"legacy point brush must be a string, got {brush!r}")
    return LegacyPoint(x=int(x), y=int(y), brush=brush)


def _parse_brush_size(value: str) -> int:
    try:
        return int(value)
    except ValueError as exc:
        raise LegacyFormatError(f"legacy brush size must be an integer, got {value!r}") from exc


def _apply_brush(builder: GraphBuilder, brush: str) -> None:
    try:
        if brush.startswith("#"):
            builder.set_color(brush)
        else:
            builder.set_size(_parse_brush_size(brush))
    except CommandPayloadError as exc:
        raise LegacyFormatError(f"unsupported legacy brush {brush!r}") from exc
