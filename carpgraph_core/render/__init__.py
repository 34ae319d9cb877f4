from .raster import new_canvas, parse_hex_color, rasterize, rasterize_graph, save_png, to_tensor
from .svg import PathSegment, SvgCircle, SvgPath, VectorScene, render_svg, render_to_vector

__all__ = [
    "PathSegment",
    "SvgCircle",
    "SvgPath",
    "VectorScene",
    "new_canvas",
    "parse_hex_color",
    "rasterize",
    "rasterize_graph",
    "render_svg",
    "render_to_vector",
    "save_png",
    "to_tensor",
]
