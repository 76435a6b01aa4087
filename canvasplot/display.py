from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
from PIL import Image


LOGGER = logging.getLogger(__name__)

# Formats Pillow can write with an alpha channel.
_ALPHA_SUFFIXES = frozenset({".png", ".webp", ".tif", ".tiff", ".gif"})


def to_image(rgba: np.ndarray) -> Image.Image:
    if rgba.dtype != np.uint8 or rgba.ndim != 3 or rgba.shape[2] != 4:
        raise ValueError("rgba must be a uint8 array with shape (H, W, 4)")
    return Image.fromarray(np.ascontiguousarray(rgba))


def persist(rgba: np.ndarray, path: str | Path) -> Path:
    """Write the canvas to ``path``; the file format follows the extension."""
    out = Path(path)
    image = to_image(rgba)
    if out.suffix.lower() not in _ALPHA_SUFFIXES:
        image = image.convert("RGB")
    if out.parent and not out.parent.exists():
        out.parent.mkdir(parents=True, exist_ok=True)
    image.save(out)
    LOGGER.debug("saved %dx%d figure to %s", rgba.shape[1], rgba.shape[0], out)
    return out


def display(rgba: np.ndarray, title: str = "Figure") -> None:
    """Hand the canvas to the platform image viewer."""
    to_image(rgba).show(title=title)
