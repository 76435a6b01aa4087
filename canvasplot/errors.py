from __future__ import annotations


class PlotDataError(ValueError):
    """Raised when plot input cannot be turned into a drawable command."""


class PlotStateError(RuntimeError):
    """Raised when a render-time invariant does not hold."""
