from __future__ import annotations

import math
from typing import Callable, Sequence

import numpy as np
from PIL import Image, ImageDraw

from canvasplot.raster.canvas import RGBA, blend_mask


Point = tuple[int, int]
ELLIPSE_SEGMENTS = 72


def fill_polygon(dst: np.ndarray, points: Sequence[Point], color: RGBA) -> None:
    if len(points) < 3:
        return
    flat = [(int(x), int(y)) for x, y in points]
    _paint(dst, color, lambda draw: draw.polygon(flat, fill=255, outline=255))


def fill_circle(dst: np.ndarray, center: Point, radius: int, color: RGBA) -> None:
    cx, cy = center
    r = max(0, int(radius))
    _paint(dst, color, lambda draw: draw.ellipse((cx - r, cy - r, cx + r, cy + r), fill=255))


def stroke_circle(dst: np.ndarray, center: Point, radius: int, color: RGBA, width: int = 1) -> None:
    cx, cy = center
    r = max(0, int(radius))
    w = max(1, int(width))
    _paint(dst, color, lambda draw: draw.ellipse((cx - r, cy - r, cx + r, cy + r), outline=255, width=w))


def ellipse_points(center: Point, semi_axes: tuple[float, float], angle_deg: float) -> list[Point]:
    """Outline of an ellipse rotated counter-clockwise as seen on screen."""
    cx, cy = center
    a, b = semi_axes
    theta = math.radians(angle_deg)
    cos_t = math.cos(theta)
    sin_t = math.sin(theta)
    t = np.linspace(0.0, 2.0 * math.pi, ELLIPSE_SEGMENTS, endpoint=False)
    dx = a * np.cos(t)
    dy = b * np.sin(t)
    # Pixel y grows downward, so a visual CCW turn flips the sine terms.
    xs = cx + dx * cos_t + dy * sin_t
    ys = cy - dx * sin_t + dy * cos_t
    return [(int(round(x)), int(round(y))) for x, y in zip(xs.tolist(), ys.tolist(), strict=True)]


def rotated_rect_points(center: Point, size: tuple[float, float], angle_deg: float) -> list[Point]:
    cx, cy = center
    hw = 0.5 * size[0]
    hh = 0.5 * size[1]
    theta = math.radians(angle_deg)
    cos_t = math.cos(theta)
    sin_t = math.sin(theta)
    out: list[Point] = []
    for dx, dy in ((-hw, hh), (-hw, -hh), (hw, -hh), (hw, hh)):
        x = cx + dx * cos_t + dy * sin_t
        y = cy - dx * sin_t + dy * cos_t
        out.append((int(round(x)), int(round(y))))
    return out


def _paint(dst: np.ndarray, color: RGBA, draw_fn: Callable[[ImageDraw.ImageDraw], None]) -> None:
    h, w = dst.shape[:2]
    image = Image.new("L", (w, h), 0)
    draw_fn(ImageDraw.Draw(image))
    blend_mask(dst, 0, 0, np.asarray(image, dtype=np.uint8), color)
