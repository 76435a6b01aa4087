from __future__ import annotations

from typing import Sequence

import numpy as np

from canvasplot.raster import draw_shapes
from canvasplot.raster.canvas import RGBA, alpha_composite, blit, draw_filled_rect, fill, new_canvas
from canvasplot.raster.draw_lines import draw_line_segment, draw_polyline
from canvasplot.raster.draw_markers import draw_markers
from canvasplot.raster.draw_text import DEFAULT_FONT_FAMILY, draw_text, font_px_from_scale, render_text_image, text_metrics


Point = tuple[int, int]


def _stroke_px(width: float) -> int:
    return max(1, int(round(width)))


class Canvas:
    """RGBA raster the figure draws on.

    Geometry arguments are already in pixel space; text scales follow the
    ``font_scale`` convention where 1.0 is a 30 px face.
    """

    def __init__(self, width: int, height: int, *, background: RGBA = (255, 255, 255, 255), font_family: str = DEFAULT_FONT_FAMILY) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("width and height must be > 0")
        self.width = int(width)
        self.height = int(height)
        self.font_family = font_family
        self.rgba = new_canvas(self.width, self.height, color=background)

    @classmethod
    def from_array(cls, rgba: np.ndarray, *, font_family: str = DEFAULT_FONT_FAMILY) -> "Canvas":
        if rgba.dtype != np.uint8 or rgba.ndim != 3 or rgba.shape[2] != 4:
            raise ValueError("rgba must be a uint8 array with shape (H, W, 4)")
        out = cls.__new__(cls)
        out.width = int(rgba.shape[1])
        out.height = int(rgba.shape[0])
        out.font_family = font_family
        out.rgba = rgba
        return out

    def clone(self) -> "Canvas":
        return Canvas.from_array(self.rgba.copy(), font_family=self.font_family)

    def clear(self, color: RGBA) -> None:
        fill(self.rgba, color)

    def stroke_line(self, p0: Point, p1: Point, color: RGBA, width: float = 1.0) -> None:
        draw_line_segment(self.rgba, int(p0[0]), int(p0[1]), int(p1[0]), int(p1[1]), color=color, width=_stroke_px(width))

    def stroke_polyline(self, points: Sequence[Point], color: RGBA, width: float = 1.0, *, closed: bool = False) -> None:
        draw_polyline(self.rgba, points, color, _stroke_px(width), closed=closed)

    def fill_circle(self, center: Point, radius: int, color: RGBA) -> None:
        draw_shapes.fill_circle(self.rgba, center, radius, color)

    def stroke_circle(self, center: Point, radius: int, color: RGBA, width: float = 1.0) -> None:
        draw_shapes.stroke_circle(self.rgba, center, radius, color, _stroke_px(width))

    def fill_markers(self, points: Sequence[Point], radius: int, color: RGBA) -> None:
        draw_markers(self.rgba, points, color, radius=radius)

    def fill_rect(self, p0: Point, p1: Point, color: RGBA) -> None:
        draw_filled_rect(self.rgba, p0[0], p0[1], p1[0], p1[1], color)

    def stroke_rect(self, p0: Point, p1: Point, color: RGBA, width: float = 1.0) -> None:
        (x0, y0), (x1, y1) = p0, p1
        self.stroke_polyline([(x0, y0), (x1, y0), (x1, y1), (x0, y1)], color, width, closed=True)

    def fill_polygon(self, points: Sequence[Point], color: RGBA) -> None:
        draw_shapes.fill_polygon(self.rgba, points, color)

    def fill_ellipse(self, center: Point, semi_axes: tuple[float, float], angle_deg: float, color: RGBA) -> None:
        self.fill_polygon(draw_shapes.ellipse_points(center, semi_axes, angle_deg), color)

    def stroke_ellipse(self, center: Point, semi_axes: tuple[float, float], angle_deg: float, color: RGBA, width: float = 1.0) -> None:
        self.stroke_polyline(draw_shapes.ellipse_points(center, semi_axes, angle_deg), color, width, closed=True)

    def measure_text(self, text: str, scale: float, weight: int = 1) -> tuple[int, int, int]:
        return text_metrics(
            text,
            font_family=self.font_family,
            font_size_px=font_px_from_scale(scale),
            embolden_px=max(1, int(weight)),
        )

    def draw_text(self, text: str, anchor: Point, scale: float, color: RGBA, weight: int = 1) -> None:
        draw_text(
            self.rgba,
            int(anchor[0]),
            int(anchor[1]),
            text,
            color,
            font_family=self.font_family,
            font_size_px=font_px_from_scale(scale),
            embolden_px=max(1, int(weight)),
        )

    def render_text_image(self, text: str, scale: float, color: RGBA, background: RGBA, weight: int = 1) -> np.ndarray:
        return render_text_image(
            text,
            color,
            background,
            font_family=self.font_family,
            font_size_px=font_px_from_scale(scale),
            embolden_px=max(1, int(weight)),
        )

    @staticmethod
    def rotate_90(image: np.ndarray) -> np.ndarray:
        """Quarter turn counter-clockwise, reading bottom-to-top."""
        return np.ascontiguousarray(np.rot90(image, k=1))

    def blit(self, image: np.ndarray, top_left: Point) -> None:
        blit(self.rgba, image, int(top_left[0]), int(top_left[1]))

    def alpha_composite(self, scratch: "Canvas", alpha: float) -> None:
        alpha_composite(self.rgba, scratch.rgba, alpha)
