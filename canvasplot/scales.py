from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

import numpy as np


DEFAULT_TICK_TARGET = 6
# Absorbs float drift in the mantissa so nice values map onto themselves.
_FRAC_EPS = 1e-9


@dataclass(frozen=True)
class TickSet:
    """Tick locations and their labels for one axis of one render pass."""

    locs: tuple[float, ...]
    labels: tuple[str, ...]
    step: float

    def __iter__(self) -> Iterator[tuple[float, str]]:
        return iter(zip(self.locs, self.labels, strict=True))

    def __len__(self) -> int:
        return len(self.locs)


def nice_number(value: float, *, round_result: bool) -> float:
    """Snap ``value`` to 1, 2, 5 or 10 times a power of ten.

    With ``round_result`` the mantissa goes to the nearest candidate
    (thresholds 1.5, 3, 7); without it the mantissa is raised to the next
    candidate (thresholds 1, 2, 5). Non-positive input is treated as 1.
    """
    if not value > 0:
        value = 1.0
    exp = np.floor(np.log10(value))
    frac = value / (10**exp)

    if round_result:
        if frac < 1.5:
            nice_frac = 1.0
        elif frac < 3.0:
            nice_frac = 2.0
        elif frac < 7.0:
            nice_frac = 5.0
        else:
            nice_frac = 10.0
    else:
        if frac <= 1.0 + _FRAC_EPS:
            nice_frac = 1.0
        elif frac <= 2.0 + _FRAC_EPS:
            nice_frac = 2.0
        elif frac <= 5.0 + _FRAC_EPS:
            nice_frac = 5.0
        else:
            nice_frac = 10.0

    return float(nice_frac * (10**exp))


def tick_step(lo: float, hi: float, target: int = DEFAULT_TICK_TARGET) -> float:
    if target <= 1:
        raise ValueError("target must be > 1")
    span = nice_number(hi - lo, round_result=False)
    return nice_number(span / (target - 1), round_result=True)


def make_ticks(lo: float, hi: float, target: int = DEFAULT_TICK_TARGET) -> TickSet:
    step = tick_step(lo, hi, target)
    ticks = _ticks_in_range(lo, hi, step)
    # A coarse step can straddle a narrow window; refine until one lands inside.
    while ticks.size == 0 and step > 0.0:
        step = nice_number(step / 2.0, round_result=True)
        ticks = _ticks_in_range(lo, hi, step)
    locs = tuple(float(v) for v in ticks.tolist())
    return TickSet(locs=locs, labels=tuple(format_tick(v, step=step) for v in locs), step=step)


def _ticks_in_range(lo: float, hi: float, step: float) -> np.ndarray:
    tick_min = np.floor(lo / step) * step
    tick_max = np.ceil(hi / step) * step

    ticks = np.arange(tick_min, tick_max + 0.5 * step, step, dtype=np.float64)
    # Normalize floating-point drift so values like -4.44e-16 become 0.
    ticks = np.rint(ticks / step) * step
    ticks[np.isclose(ticks, 0.0, rtol=0.0, atol=step * 1e-9)] = 0.0

    eps = max(1e-12, step * 1e-9)
    kept = ticks[(ticks >= lo - eps) & (ticks <= hi + eps)]
    # Ticks kept by the tolerance sit on the window edge, never past it.
    return np.clip(kept, lo, hi)


def format_tick(value: float, *, step: float) -> str:
    if not np.isfinite(value):
        return str(value)
    decimals = 0 if step >= 1.0 else 1
    out = f"{value:.{decimals}f}"
    if out.startswith("-") and float(out) == 0.0:
        out = out[1:]
    return out
