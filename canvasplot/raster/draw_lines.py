from __future__ import annotations

from typing import Sequence

import numpy as np

from canvasplot.raster.canvas import RGBA, draw_hline, draw_pixel, draw_vline


Point = tuple[int, int]


def draw_polyline(dst: np.ndarray, points: Sequence[Point], color: RGBA, width: int = 1, *, closed: bool = False) -> None:
    if not points:
        return
    if len(points) == 1:
        _draw_square_brush(dst, points[0][0], points[0][1], color=color, width=width)
        return
    pairs = list(zip(points[:-1], points[1:]))
    if closed and len(points) > 2:
        pairs.append((points[-1], points[0]))
    for (x0, y0), (x1, y1) in pairs:
        draw_line_segment(dst, int(x0), int(y0), int(x1), int(y1), color=color, width=width)


def draw_line_segment(dst: np.ndarray, x0: int, y0: int, x1: int, y1: int, color: RGBA, width: int = 1) -> None:
    # Walk only the part of the segment that can touch the canvas.
    reach = max(0, width // 2)
    clipped = _clip_segment(
        x0,
        y0,
        x1,
        y1,
        (-reach, -reach, dst.shape[1] - 1 + reach, dst.shape[0] - 1 + reach),
    )
    if clipped is None:
        return
    x0, y0, x1, y1 = clipped

    if width <= 1 and y0 == y1:
        draw_hline(dst, x0, x1, y0, color)
        return
    if width <= 1 and x0 == x1:
        draw_vline(dst, x0, y0, y1, color)
        return

    dx = abs(x1 - x0)
    sx = 1 if x0 < x1 else -1
    dy = -abs(y1 - y0)
    sy = 1 if y0 < y1 else -1
    err = dx + dy

    while True:
        _draw_square_brush(dst, x0, y0, color=color, width=width)
        if x0 == x1 and y0 == y1:
            break
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x0 += sx
        if e2 <= dx:
            err += dx
            y0 += sy


def _draw_square_brush(dst: np.ndarray, x: int, y: int, color: RGBA, width: int) -> None:
    radius = max(0, width // 2)
    if radius == 0:
        draw_pixel(dst, x, y, color)
        return
    for yy in range(y - radius, y + radius + 1):
        draw_hline(dst, x - radius, x + radius, yy, color)


def _clip_segment(
    x0: int,
    y0: int,
    x1: int,
    y1: int,
    box: tuple[int, int, int, int],
) -> tuple[int, int, int, int] | None:
    """Liang-Barsky clip of a segment to an inclusive pixel box, or ``None`` when it misses."""
    xmin, ymin, xmax, ymax = box
    if xmin <= min(x0, x1) and max(x0, x1) <= xmax and ymin <= min(y0, y1) and max(y0, y1) <= ymax:
        return x0, y0, x1, y1

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
