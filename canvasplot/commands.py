from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Literal, Union

import numpy as np

from canvasplot.errors import PlotDataError
from canvasplot.geometry import Bounds


RGBA = tuple[int, int, int, int]
HAlign = Literal["left", "center", "right"]
VAlign = Literal["baseline", "center", "top", "bottom"]

H_ALIGNS: frozenset[str] = frozenset({"left", "center", "right"})
V_ALIGNS: frozenset[str] = frozenset({"baseline", "center", "top", "bottom"})

BLACK: RGBA = (0, 0, 0, 255)
WHITE: RGBA = (255, 255, 255, 255)


def coerce_color(color: tuple[int, ...]) -> RGBA:
    try:
        channels = tuple(int(c) for c in color)
    except (TypeError, ValueError) as exc:
        raise PlotDataError(f"color must be a sequence of integers, got {color!r}") from exc
    if len(channels) == 3:
        channels += (255,)
    if len(channels) != 4:
        raise PlotDataError(f"color must have 3 or 4 channels, got {len(channels)}")
    if any(c < 0 or c > 255 for c in channels):
        raise PlotDataError(f"color channels must be in [0, 255], got {channels}")
    r, g, b, a = channels
    return (r, g, b, a)


@dataclass(frozen=True)
class ShapeStyle:
    """Outline and fill of a closed shape.

    ``fill_alpha`` selects the fill path: 0 skips the fill, values strictly
    between 0 and 1 are blended through a scratch buffer and 1 is painted
    directly. A ``stroke_width`` of zero or less skips the outline.
    """

    stroke_color: RGBA = BLACK
    stroke_width: float = 1.0
    fill_color: RGBA = WHITE
    fill_alpha: float = 1.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "stroke_color", coerce_color(self.stroke_color))
        object.__setattr__(self, "fill_color", coerce_color(self.fill_color))
        object.__setattr__(self, "fill_alpha", float(max(0.0, min(1.0, self.fill_alpha))))

    @property
    def has_fill(self) -> bool:
        return self.fill_alpha > 0.0

    @property
    def translucent(self) -> bool:
        return 0.0 < self.fill_alpha < 1.0

    @property
    def has_stroke(self) -> bool:
        return self.stroke_width > 0.0


@dataclass(frozen=True, eq=False)
class Line:
    x: np.ndarray
    y: np.ndarray
    color: RGBA = (0, 0, 255, 255)
    width: float = 1.0
    label: str = ""

    def expand_bounds(self, bounds: Bounds) -> None:
        for xv, yv in zip(self.x.tolist(), self.y.tolist(), strict=True):
            bounds.expand(xv, yv)

    @property
    def legend_color(self) -> RGBA:
        return self.color


@dataclass(frozen=True, eq=False)
class Scatter:
    x: np.ndarray
    y: np.ndarray
    color: RGBA = (255, 0, 0, 255)
    # Marker radius in pixels; never scaled with the data.
    marker_size: float = 4.0
    label: str = ""

    def expand_bounds(self, bounds: Bounds) -> None:
        for xv, yv in zip(self.x.tolist(), self.y.tolist(), strict=True):
            bounds.expand(xv, yv)

    @property
    def legend_color(self) -> RGBA:
        return self.color


@dataclass(frozen=True)
class Text:
    x: float
    y: float
    text: str
    color: RGBA = BLACK
    font_scale: float = 0.4
    weight: int = 1
    halign: HAlign = "left"
    valign: VAlign = "baseline"
    label: str = ""

    def expand_bounds(self, bounds: Bounds) -> None:
        # Annotations never widen the autoscaled window.
        return None

    @property
    def legend_color(self) -> RGBA:
        return self.color


@dataclass(frozen=True)
class _Shape:
    style: ShapeStyle = field(default_factory=ShapeStyle, kw_only=True)
    label: str = field(default="", kw_only=True)

    @property
    def color(self) -> RGBA:
        return self.style.stroke_color

    @property
    def legend_color(self) -> RGBA:
        if self.style.has_fill:
            return self.style.fill_color
        return self.style.stroke_color


@dataclass(frozen=True)
class Circle(_Shape):
    cx: float
    cy: float
    radius: float

    def expand_bounds(self, bounds: Bounds) -> None:
        bounds.expand(self.cx - self.radius, self.cy - self.radius)
        bounds.expand(self.cx + self.radius, self.cy + self.radius)


@dataclass(frozen=True)
class _Rect(_Shape):
    x0: float
    y0: float
    x1: float
    y1: float

    def expand_bounds(self, bounds: Bounds) -> None:
        bounds.expand(self.x0, self.y0)
        bounds.expand(self.x1, self.y1)


@dataclass(frozen=True)
class RectLTRB(_Rect):
    """Rectangle given by two opposite corners."""


@dataclass(frozen=True)
class RectXYWH(_Rect):
    """Rectangle given by an origin corner and a signed size, stored as corners."""

    @classmethod
    def from_xywh(cls, x: float, y: float, w: float, h: float, **kwargs) -> "RectXYWH":
        return cls(x, y, x + w, y + h, **kwargs)


@dataclass(frozen=True)
class RotatedRect(_Shape):
    cx: float
    cy: float
    width: float
    height: float
    angle_deg: float = 0.0

    def expand_bounds(self, bounds: Bounds) -> None:
        r = 0.5 * math.hypot(self.width, self.height)
        bounds.expand(self.cx - r, self.cy - r)
        bounds.expand(self.cx + r, self.cy + r)


@dataclass(frozen=True, eq=False)
class Polygon(_Shape):
    x: np.ndarray
    y: np.ndarray

    def expand_bounds(self, bounds: Bounds) -> None:
        for xv, yv in zip(self.x.tolist(), self.y.tolist(), strict=True):
            bounds.expand(xv, yv)


@dataclass(frozen=True)
class Ellipse(_Shape):
    cx: float
    cy: float
    width: float
    height: float
    angle_deg: float = 0.0

    def expand_bounds(self, bounds: Bounds) -> None:
        bounds.expand(self.cx - 0.5 * self.width, self.cy - 0.5 * self.height)
        bounds.expand(self.cx + 0.5 * self.width, self.cy + 0.5 * self.height)


Command = Union[Line, Scatter, Text, Circle, RectLTRB, RectXYWH, RotatedRect, Polygon, Ellipse]
