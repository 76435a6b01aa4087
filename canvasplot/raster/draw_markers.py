from __future__ import annotations

from functools import lru_cache
from typing import Sequence

import numpy as np

from canvasplot.raster.canvas import RGBA, blend_mask


def draw_markers(dst: np.ndarray, points: Sequence[tuple[int, int]], color: RGBA, radius: int = 4) -> None:
    stamp = _disc_mask(max(0, int(radius)))
    r = stamp.shape[0] // 2
    for x, y in points:
        blend_mask(dst, int(x) - r, int(y) - r, stamp, color)


@lru_cache(maxsize=32)
def _disc_mask(radius: int) -> np.ndarray:
    yy, xx = np.mgrid[-radius : radius + 1, -radius : radius + 1]
    inside = (xx * xx + yy * yy) <= radius * radius + radius
    return np.where(inside, 255, 0).astype(np.uint8)
