from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, get_args

from canvasplot.errors import PlotStateError
from canvasplot.geometry import Axes, Bounds, fix_ranges


LegendLocation = Literal[
    "northWest",
    "north",
    "northEast",
    "west",
    "center",
    "east",
    "southWest",
    "south",
    "southEast",
]
LEGEND_LOCATIONS: tuple[LegendLocation, ...] = get_args(LegendLocation)
DEFAULT_LEGEND_LOCATION: LegendLocation = "southEast"


@dataclass(frozen=True)
class Margins:
    left: int = 60
    right: int = 20
    top: int = 40
    bottom: int = 60
    tick_len: int = 5
    # Title baseline sits this far in from the left edge and half as far from the top.
    title_offset: int = 50


@dataclass(frozen=True)
class RequestedLimits:
    """User-fixed limits; ``None`` leaves that axis to the data."""

    x: tuple[float, float] | None = None
    y: tuple[float, float] | None = None


def plot_size(width: int, height: int, margins: Margins) -> tuple[int, int]:
    plot_w = width - margins.left - margins.right
    plot_h = height - margins.top - margins.bottom
    if plot_w <= 1 or plot_h <= 1:
        raise PlotStateError("figure too small for plotting viewport")
    return plot_w, plot_h


def resolve_axes(axes: Axes, bounds: Bounds, requested: RequestedLimits | None = None) -> Axes:
    """Compute the visible window for one render pass, updating ``axes`` in place.

    Order matters: base limits (data or user), symmetric padding, zero-span
    repair, equal-scale widening, then a second zero-span repair.
    """
    requested = requested or RequestedLimits()
    if bounds.valid():
        data_x = (bounds.xmin, bounds.xmax)
        data_y = (bounds.ymin, bounds.ymax)
    else:
        data_x = (0.0, 1.0)
        data_y = (0.0, 1.0)

    if axes.autoscale:
        axes.xmin, axes.xmax = data_x
        axes.ymin, axes.ymax = data_y
    else:
        axes.xmin, axes.xmax = requested.x if requested.x is not None else data_x
        axes.ymin, axes.ymax = requested.y if requested.y is not None else data_y

    if axes.pad_frac > 0.0:
        dx = (axes.xmax - axes.xmin) * axes.pad_frac
        dy = (axes.ymax - axes.ymin) * axes.pad_frac
        axes.xmin -= dx
        axes.xmax += dx
        axes.ymin -= dy
        axes.ymax += dy
    fix_ranges(axes)

    if axes.equal_scale:
        span = max(axes.xmax - axes.xmin, axes.ymax - axes.ymin)
        xmid = 0.5 * (axes.xmin + axes.xmax)
        ymid = 0.5 * (axes.ymin + axes.ymax)
        axes.xmin, axes.xmax = xmid - span / 2, xmid + span / 2
        axes.ymin, axes.ymax = ymid - span / 2, ymid + span / 2
    fix_ranges(axes)
    return axes


@dataclass(frozen=True)
class PlotTransform:
    """Maps data coordinates into canvas pixels for one resolved window."""

    xmin: float
    xmax: float
    ymin: float
    ymax: float
    width: int
    height: int
    margins: Margins

    def __post_init__(self) -> None:
        if not (self.xmax - self.xmin) > 0 or not (self.ymax - self.ymin) > 0:
            raise PlotStateError("axis span must be > 0 before mapping to pixels")

    @classmethod
    def from_axes(cls, axes: Axes, width: int, height: int, margins: Margins) -> "PlotTransform":
        return cls(
            xmin=axes.xmin,
            xmax=axes.xmax,
            ymin=axes.ymin,
            ymax=axes.ymax,
            width=width,
            height=height,
            margins=margins,
        )

    @property
    def plot_w(self) -> int:
        return self.width - self.margins.left - self.margins.right

    @property
    def plot_h(self) -> int:
        return self.height - self.margins.top - self.margins.bottom

    @property
    def scale_x(self) -> float:
        return self.plot_w / (self.xmax - self.xmin)

    @property
    def scale_y(self) -> float:
        return self.plot_h / (self.ymax - self.ymin)

    def data_to_pixel(self, x: float, y: float) -> tuple[int, int]:
        xf = (x - self.xmin) / (self.xmax - self.xmin)
        yf = (y - self.ymin) / (self.ymax - self.ymin)
        px = self.margins.left + int(xf * self.plot_w + 0.5)
        py = self.height - self.margins.bottom - int(yf * self.plot_h + 0.5)
        return px, py

    def pixel_to_data(self, px: float, py: float) -> tuple[float, float]:
        xf = (px - self.margins.left) / self.plot_w
        yf = (self.height - self.margins.bottom - py) / self.plot_h
        return (self.xmin + xf * (self.xmax - self.xmin), self.ymin + yf * (self.ymax - self.ymin))

    def length_x(self, value: float) -> float:
        return value * self.scale_x

    def length_y(self, value: float) -> float:
        return value * self.scale_y


def legend_anchor(
    loc: LegendLocation | str,
    box_w: int,
    box_h: int,
    *,
    width: int,
    height: int,
    margins: Margins,
) -> tuple[int, int]:
    plot_w = width - margins.left - margins.right
    plot_h = height - margins.top - margins.bottom
    left = margins.left
    right = width - margins.right - box_w
    top = margins.top
    bottom = height - margins.bottom - box_h
    hmid = left + (plot_w - box_w) // 2
    vmid = top + (plot_h - box_h) // 2

    positions = {
        "northWest": (left, top),
        "north": (hmid, top),
        "northEast": (right, top),
        "west": (left, vmid),
        "center": (hmid, vmid),
        "east": (right, vmid),
        "southWest": (left, bottom),
        "south": (hmid, bottom),
        "southEast": (right, bottom),
    }
    return positions.get(loc, positions[DEFAULT_LEGEND_LOCATION])


def anchored_text_position(
    anchor: tuple[int, int],
    size: tuple[int, int, int],
    halign: str = "left",
    valign: str = "baseline",
) -> tuple[int, int]:
    """Shift a pixel anchor so text drawn from its baseline honours the alignment.

    ``size`` is (width, height above baseline, depth below baseline).
    """
    width, height, baseline = size
    x, y = anchor
    if halign == "center":
        x -= width // 2
    elif halign == "right":
        x -= width

    if valign == "center":
        y += height // 2
    elif valign == "top":
        y += height
    elif valign == "bottom":
        y -= baseline
    return x, y
