from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

import numpy as np


RenderState = Literal["clean", "dirty"]


@dataclass
class DirtyState:
    """Two-state gate in front of the render pipeline.

    Every mutation moves the figure to ``dirty``; only a completed render
    moves it back to ``clean``. ``passes`` counts completed renders.
    """

    state: RenderState = "dirty"
    passes: int = 0

    @property
    def dirty(self) -> bool:
        return self.state == "dirty"

    def mark_dirty(self) -> None:
        self.state = "dirty"

    def mark_clean(self) -> None:
        self.state = "clean"
        self.passes += 1


@dataclass
class LabelCache:
    """Rasterized, rotated y-axis label; rebuilt only when its text changes."""

    text: str = ""
    image: np.ndarray | None = None
    valid: bool = False
    builds: int = 0

    def invalidate(self) -> None:
        self.valid = False
        self.image = None

    def store(self, text: str, image: np.ndarray) -> None:
        self.text = text
        self.image = image
        self.valid = True
        self.builds += 1
