from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional
import xml.etree.ElementTree as ET

from carpgraph_core.core.commands import Command, CommandKind
from carpgraph_core.core.graph import Graph


SVG_NAMESPACE = "http://www.w3.org/2000/svg"
DEFAULT_STROKE_WIDTH = 2
DEFAULT_STROKE_COLOR = "000000"

Point = tuple[int, int]


@dataclass(frozen=True)
class SvgCircle:
    cx: int
    cy: int
    r: int
    fill: str


@dataclass(frozen=True)
class PathSegment:
    move_to: Point
    line_to: Optional[Point] = None

    def to_path_data(self) -> str:
        x, y = self.move_to
        if self.line_to is None:
            return f"M{x} {y}"
        px, py = self.line_to
        return f"M{x} {y} L{px} {py}"


@dataclass(frozen=True)
class SvgPath:
    segments: tuple[PathSegment, ...]
    stroke: str
    stroke_width: int

    @property
    def d(self) -> str:
        return " ".join(segment.to_path_data() for segment in self.segments)


SvgElement = SvgCircle | SvgPath


@dataclass
class VectorScene:
    width: int
    height: int
    elements: list[SvgElement] = field(default_factory=list)
    background: str = "white"

    @property
    def circles(self) -> list[SvgCircle]:
        return [elem for elem in self.elements if isinstance(elem, SvgCircle)]

    @property
    def paths(self) -> list[SvgPath]:
        return [elem for elem in self.elements if isinstance(elem, SvgPath)]

    def to_element(self) -> ET.Element:
        root = ET.Element(
            "svg",
            {
                "viewBox": f"0 0 {self.width} {self.height}",
                "xmlns": SVG_NAMESPACE,
                "style": f"background: {self.background}; width: {self.width}px; height: {self.height}px",
                "class": "carpgraph",
            },
        )
        for elem in self.elements:
            if isinstance(elem, SvgCircle):
                ET.SubElement(
                    root,
                    "circle",
                    {"cx": str(elem.cx), "cy": str(elem.cy), "r": str(elem.r), "fill": f"#{elem.fill}"},
                )
            else:
                ET.SubElement(
                    root,
                    "path",
                    {"d": elem.d, "stroke": f"#{elem.stroke}", "stroke-width": str(elem.stroke_width)},
                )
        return root

    def to_markup(self) -> str:
        return ET.tostring(self.to_element(), encoding="unicode")

    @classmethod
    def from_markup(cls, svg_markup: str) -> "VectorScene":
        root = ET.fromstring(svg_markup)
        viewbox = _parse_viewbox(root.attrib.get("viewBox"))
        if viewbox is None:
            width = _parse_int(root.attrib.get("width"))
            height = _parse_int(root.attrib.get("height"))
        else:
            width, height = viewbox
        elements: list[SvgElement] = []
        for elem in root.iter():
            tag = _strip_namespace(elem.tag)
            if tag == "circle":
                elements.append(_parse_circle(elem))
            elif tag == "path":
                path = _parse_path(elem)
                if path is not None:
                    elements.append(path)
        return cls(
            width=width,
            height=height,
            elements=elements,
            background=_parse_background(root.attrib.get("style")) or "white",
        )


class _Stroke:
    """Points of the current stroke and the style of its most recent point."""

    def __init__(self) -> None:
        self.segments: list[PathSegment] = []
        self.previous: Optional[Point] = None
        self.color = DEFAULT_STROKE_COLOR
        self.width = DEFAULT_STROKE_WIDTH

    def add(self, point: Point, color: str, width: int) -> None:
        self.segments.append(PathSegment(move_to=point, line_to=self.previous))
        self.previous = point
        self.color = color
        self.width = width

    def to_path(self) -> Optional[SvgPath]:
        if not any(segment.line_to is not None for segment in self.segments):
            return None
        return SvgPath(segments=tuple(self.segments), stroke=self.color, stroke_width=self.width)


def render_to_vector(graph: Graph, *, background: str = "white") -> VectorScene:
    """Walk the command stream and build the vector scene for ``graph``.

    Every point becomes a dot of the current brush; consecutive points of a
    stroke are joined by a path that is flushed at each LINE and at the end.
    """
    stroke_width = DEFAULT_STROKE_WIDTH
    stroke_color = DEFAULT_STROKE_COLOR
    scene = VectorScene(width=graph.width, height=graph.height, background=background)
    stroke = _Stroke()

    for command in graph.commands:
        if command.kind is CommandKind.SIZE:
            stroke_width = _read_size(command)
        elif command.kind is CommandKind.COLOR:
            stroke_color = _read_color(command)
        elif command.kind is CommandKind.LINE:
            _flush(scene, stroke)
            stroke = _Stroke()
        elif command.kind is CommandKind.POINT:
            point = _read_point(command)
            stroke.add(point, stroke_color, stroke_width)
            scene.elements.append(SvgCircle(cx=point[0], cy=point[1], r=stroke_width // 2, fill=stroke_color))
        else:
            raise AssertionError(f"command kind never stored in a graph: {command.kind!r}")

    _flush(scene, stroke)
    return scene


def render_svg(graph: Graph, *, background: str = "white") -> str:
    return render_to_vector(graph, background=background).to_markup()


def _flush(scene: VectorScene, stroke: _Stroke) -> None:
    path = stroke.to_path()
    if path is not None:
        scene.elements.append(path)


def _read_size(command: Command) -> int:
    if not command.complete:
        return 0
    return command.size_value()


def _read_color(command: Command) -> str:
    if not command.complete:
        return DEFAULT_STROKE_COLOR
    try:
        return command.data.decode("utf-8")
    except UnicodeDecodeError:
        return DEFAULT_STROKE_COLOR


def _read_point(command: Command) -> Point:
    if not command.complete:
        return (0, 0)
    return command.point_value()


def _strip_namespace(tag: str) -> str:
    if "}" in tag:
        return tag.split("}", 1)[1]
    return tag


def _parse_int(value: Optional[str]) -> int:
    if not value:
        return 0
    value = value.strip()
    if value.endswith("px"):
        value = value[:-2]
    try:
        return int(float(value))
    except ValueError:
        return 0


def _parse_viewbox(value: Optional[str]) -> Optional[tuple[int, int]]:
    if not value:
        return None
    parts = value.replace(",", " ").split()
    if len(parts) != 4:
        return None
    return _parse_int(parts[2]), _parse_int(parts[3])


def _parse_background(style: Optional[str]) -> Optional[str]:
    if not style:
        return None
    for declaration in style.split(";"):
        name, _, value = declaration.partition(":")
        if name.strip() == "background":
            return value.strip()
    return None


def _strip_hash(value: Optional[str]) -> str:
    if not value:
        return DEFAULT_STROKE_COLOR
    return value[1:] if value.startswith("#") else value


def _parse_circle(elem: ET.Element) -> SvgCircle:
    return SvgCircle(
        cx=_parse_int(elem.attrib.get("cx")),
        cy=_parse_int(elem.attrib.get("cy")),
        r=_parse_int(elem.attrib.get("r")),
        fill=_strip_hash(elem.attrib.get("fill")),
    )


def _parse_path(elem: ET.Element) -> Optional[SvgPath]:
    segments = _parse_path_data(elem.attrib.get("d"))
    if not segments:
        return None
    return SvgPath(
        segments=tuple(segments),
        stroke=_strip_hash(elem.attrib.get("stroke")),
        stroke_width=_parse_int(elem.attrib.get("stroke-width")),
    )


def _parse_path_data(value: Optional[str]) -> list[PathSegment]:
    if not value:
        return []
    tokens = value.replace("M", " M ").replace("L", " L ").split()
    segments: list[PathSegment] = []
    i = 0
    while i + 2 < len(tokens):
        op = tokens[i]
        x = _parse_int(tokens[i + 1])
        y = _parse_int(tokens[i + 2])
        i += 3
        if op == "M":
            segments.append(PathSegment(move_to=(x, y)))
        elif op == "L" and segments:
            last = segments[-1]
            segments[-1] = PathSegment(move_to=last.move_to, line_to=(x, y))
    return segments
