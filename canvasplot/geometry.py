from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass
class Bounds:
    """Running min/max of every data point ever added to a figure."""

    xmin: float = math.inf
    xmax: float = -math.inf
    ymin: float = math.inf
    ymax: float = -math.inf

    def expand(self, x: float, y: float) -> None:
        self.xmin = min(self.xmin, x)
        self.xmax = max(self.xmax, x)
        self.ymin = min(self.ymin, y)
        self.ymax = max(self.ymax, y)

    def valid(self) -> bool:
        return math.isfinite(self.xmin)


@dataclass
class Axes:
    """Visible plotting window plus the flags that shape it."""

    xmin: float = 0.0
    xmax: float = 1.0
    ymin: float = 0.0
    ymax: float = 1.0
    pad_frac: float = 0.05
    autoscale: bool = True
    equal_scale: bool = False
    grid: bool = False

    @property
    def xspan(self) -> float:
        return self.xmax - self.xmin

    @property
    def yspan(self) -> float:
        return self.ymax - self.ymin

    def limits(self) -> tuple[float, float, float, float]:
        return (self.xmin, self.xmax, self.ymin, self.ymax)


def ensure_nonzero_span(lo: float, hi: float) -> tuple[float, float]:
    if lo == hi:
        eps = max(abs(lo) * 1e-3, 1e-3)
        return (lo - eps, hi + eps)
    return (lo, hi)


def fix_ranges(axes: Axes) -> None:
    axes.xmin, axes.xmax = ensure_nonzero_span(axes.xmin, axes.xmax)
    axes.ymin, axes.ymax = ensure_nonzero_span(axes.ymin, axes.ymax)
