from __future__ import annotations

from pathlib import Path
from typing import Optional

import numpy as np
from PIL import Image
import torch

from carpgraph_core.core.graph import Graph

from .svg import SvgCircle, SvgPath, VectorScene, render_to_vector


RGBA = tuple[int, int, int, int]

WHITE: RGBA = (255, 255, 255, 255)
BLACK: RGBA = (0, 0, 0, 255)
DEFAULT_MAX_PIXELS = 16_000_000


def parse_hex_color(value: Optional[str], default: RGBA = BLACK) -> RGBA:
    if not value:
        return default
    hex_value = value.strip()
    if hex_value.startswith("#"):
        hex_value = hex_value[1:]
    try:
        if len(hex_value) in (3, 4):
            channels = [int(ch * 2, 16) for ch in hex_value]
        elif len(hex_value) in (6, 8):
            channels = [int(hex_value[i : i + 2], 16) for i in range(0, len(hex_value), 2)]
        else:
            return default
    except ValueError:
        return default
    if len(channels) == 3:
        channels.append(255)
    return (channels[0], channels[1], channels[2], channels[3])


def new_canvas(width: int, height: int, color: RGBA = WHITE) -> np.ndarray:
    canvas = np.zeros((height, width, 4), dtype=np.uint8)
    canvas[:, :] = color
    return canvas


def draw_disc(dst: np.ndarray, cx: int, cy: int, radius: int, color: RGBA) -> None:
    if radius <= 0:
        return
    h, w, _ = dst.shape
    x0 = max(0, cx - radius)
    x1 = min(w, cx + radius + 1)
    y0 = max(0, cy - radius)
    y1 = min(h, cy + radius + 1)
    if x1 <= x0 or y1 <= y0:
        return
    yy, xx = np.ogrid[y0:y1, x0:x1]
    mask = (xx - cx) ** 2 + (yy - cy) ** 2 <= radius * radius
    region = dst[y0:y1, x0:x1]
    pixels = region[mask]
    _blend(pixels, color)
    region[mask] = pixels


def draw_segment(
    dst: np.ndarray, x0: int, y0: int, x1: int, y1: int, color: RGBA, width: int = 1
) -> None:
    if width <= 0:
        return
    h, w, _ = dst.shape
    half = width // 2
    clipped = _clip_segment(x0, y0, x1, y1, -half, -half, w - 1 + half, h - 1 + half)
    if clipped is None:
        return
    x0, y0, x1, y1 = clipped
    dx = abs(x1 - x0)
    sx = 1 if x0 < x1 else -1
    dy = -abs(y1 - y0)
    sy = 1 if y0 < y1 else -1
    err = dx + dy

    while True:
        _draw_square_brush(dst, x0, y0, color, half)
        if x0 == x1 and y0 == y1:
            break
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x0 += sx
        if e2 <= dx:
            err += dx
            y0 += sy


def rasterize(
    scene: VectorScene,
    *,
    background: RGBA = WHITE,
    max_pixels: int = DEFAULT_MAX_PIXELS,
) -> np.ndarray:
    if scene.width <= 0 or scene.height <= 0:
        raise ValueError("scene width and height must be > 0 to rasterize")
    if scene.width * scene.height > max_pixels:
        raise ValueError(
            f"scene too large to rasterize: {scene.width}x{scene.height} exceeds {max_pixels} pixels"
        )
    canvas = new_canvas(scene.width, scene.height, background)
    for elem in scene.elements:
        if isinstance(elem, SvgCircle):
            draw_disc(canvas, elem.cx, elem.cy, elem.r, parse_hex_color(elem.fill))
        elif isinstance(elem, SvgPath):
            color = parse_hex_color(elem.stroke)
            for segment in elem.segments:
                if segment.line_to is None:
                    continue
                x0, y0 = segment.move_to
                x1, y1 = segment.line_to
                draw_segment(canvas, x0, y0, x1, y1, color, width=elem.stroke_width)
    return canvas


def rasterize_graph(
    graph: Graph,
    *,
    background: RGBA = WHITE,
    max_pixels: int = DEFAULT_MAX_PIXELS,
) -> np.ndarray:
    return rasterize(render_to_vector(graph), background=background, max_pixels=max_pixels)


def save_png(canvas: np.ndarray, path: str | Path) -> Path:
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    Image.fromarray(np.ascontiguousarray(canvas, dtype=np.uint8)).save(out, format="PNG")
    return out


def to_tensor(canvas: np.ndarray) -> torch.Tensor:
    """RGBA255 tensor shaped (height, width, 4), matching window-matrix frames."""
    if canvas.ndim != 3 or canvas.shape[2] != 4:
        raise ValueError(f"canvas must be shaped (h, w, 4), got {canvas.shape}")
    return torch.from_numpy(np.ascontiguousarray(canvas, dtype=np.uint8)).clone()


def _draw_square_brush(dst: np.ndarray, x: int, y: int, color: RGBA, half: int) -> None:
    h, w, _ = dst.shape
    ya = max(0, y - half)
    yb = min(h, y + half + 1)
    xa = max(0, x - half)
    xb = min(w, x + half + 1)
    if ya >= yb or xa >= xb:
        return
    _blend(dst[ya:yb, xa:xb], color)


def _blend(pixels: np.ndarray, color: RGBA) -> None:
    r, g, b, a = color
    if a <= 0:
        return
    if a >= 255:
        pixels[..., 0] = r
        pixels[..., 1] = g
        pixels[..., 2] = b
        pixels[..., 3] = 255
        return
    alpha = a / 255.0
    src = np.asarray((r, g, b), dtype=np.float32) * alpha
    pixels[..., :3] = (src + pixels[..., :3].astype(np.float32) * (1.0 - alpha)).astype(np.uint8)
    pixels[..., 3] = 255


def _clip_segment(
    x0: int, y0: int, x1: int, y1: int, xmin: int, ymin: int, xmax: int, ymax: int
) -> Optional[tuple[int, int, int, int]]:
    dx = x1 - x0
    dy = y1 - y0
    t0, t1 = 0.0, 1.0
    for p, q in ((-dx, x0 - xmin), (dx, xmax - x0), (-dy, y0 - ymin), (dy, ymax - y0)):
        if p == 0:
            if q < 0:
                return None
            continue
        t = q / p
        if p < 0:
            if t > t1:
                return None
            t0 = max(t0, t)
        else:
            if t < t0:
                return None
            t1 = min(t1, t)
    return (
        int(round(x0 + t0 * dx)),
        int(round(y0 + t0 * dy)),
        int(round(x0 + t1 * dx)),
        int(round(y0 + t1 * dy)),
    )
