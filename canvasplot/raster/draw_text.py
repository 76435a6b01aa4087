from __future__ import annotations

from functools import lru_cache
from pathlib import Path

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from canvasplot.raster.canvas import RGBA, blend_mask


DEFAULT_FONT_FAMILY = "DejaVu Sans"
# Pixel size of a font at scale 1.0.
FONT_SCALE_PX = 30.0
SANS_FONT_FALLBACK_PATTERNS = (
    "dejavusans",
    "dejavu sans",
    "liberationsans",
    "helvetica",
    "arial",
    "freesans",
)


def font_px_from_scale(font_scale: float) -> float:
    return max(1.0, float(font_scale) * FONT_SCALE_PX)


def draw_text(
    dst: np.ndarray,
    x: int,
    y: int,
    text: str,
    color: RGBA,
    *,
    font_family: str = DEFAULT_FONT_FAMILY,
    font_size_px: float = 12.0,
    embolden_px: int = 1,
) -> None:
    """Draw ``text`` with the left end of its baseline at (x, y)."""
    if not text:
        return
    font = _load_font(font_family=font_family, font_size_px=font_size_px)
    mask, left, top = _render_mask(text=text, font=font)
    if embolden_px > 1:
        mask = _embolden(mask, embolden_px)
    blend_mask(dst, x + left, y + top, mask, color)


def text_metrics(
    text: str,
    *,
    font_family: str = DEFAULT_FONT_FAMILY,
    font_size_px: float = 12.0,
    embolden_px: int = 1,
) -> tuple[int, int, int]:
    """Return (width, height above baseline, depth below baseline) in pixels."""
    font = _load_font(font_family=font_family, font_size_px=font_size_px)
    if not text:
        ascent, descent = font.getmetrics()
        return (0, max(1, int(ascent)), max(0, int(descent)))
    left, top, right, bottom = font.getbbox(text, anchor="ls")
    w = max(0, int(right - left)) + max(0, embolden_px - 1)
    h = max(1, int(-top))
    baseline = max(0, int(bottom))
    return (w, h, baseline)


def render_text_image(
    text: str,
    color: RGBA,
    background: RGBA,
    *,
    font_family: str = DEFAULT_FONT_FAMILY,
    font_size_px: float = 12.0,
    embolden_px: int = 1,
) -> np.ndarray:
    """Rasterize ``text`` onto its own opaque RGBA tile sized to the text extents."""
    w, h, baseline = text_metrics(text, font_family=font_family, font_size_px=font_size_px, embolden_px=embolden_px)
    tile = np.zeros((h + baseline, max(1, w), 4), dtype=np.uint8)
    tile[:, :] = background
    draw_text(
        tile,
        0,
        h,
        text,
        color,
        font_family=font_family,
        font_size_px=font_size_px,
        embolden_px=embolden_px,
    )
    return tile


def _embolden(mask: np.ndarray, embolden_px: int) -> np.ndarray:
    if embolden_px <= 1:
        return mask
    out = np.zeros((mask.shape[0], mask.shape[1] + embolden_px - 1), dtype=np.uint8)
    out[:, : mask.shape[1]] = mask
    for shift in range(1, embolden_px):
        view = out[:, shift : shift + mask.shape[1]]
        np.maximum(view, mask, out=view)
    return out


@lru_cache(maxsize=128)
def _render_mask(text: str, font: ImageFont.FreeTypeFont) -> tuple[np.ndarray, int, int]:
    left, top, right, bottom = font.getbbox(text, anchor="ls")
    width = max(1, int(right - left))
    height = max(1, int(bottom - top))
    image = Image.new("L", (width, height), 0)
    draw = ImageDraw.Draw(image)
    draw.text((-left, -top), text, fill=255, font=font, anchor="ls")
    mask = np.asarray(image, dtype=np.uint8)
    mask.setflags(write=False)
    return mask, int(left), int(top)


@lru_cache(maxsize=64)
def _load_font(font_family: str, font_size_px: float) -> ImageFont.FreeTypeFont:
    size = max(1, int(round(font_size_px)))
    font_path = _resolve_font_path(font_family)
    if font_path is not None:
        try:
            return ImageFont.truetype(str(font_path), size=size)
        except OSError:
            pass
    return ImageFont.load_default(size=size)


@lru_cache(maxsize=16)
def _resolve_font_path(font_family: str) -> Path | None:
    wanted = font_family.strip().lower() if font_family.strip() else DEFAULT_FONT_FAMILY.lower()
    patterns = (wanted,) + SANS_FONT_FALLBACK_PATTERNS

    font_dirs = [
        Path.home() / "Library" / "Fonts",
        Path("/Library/Fonts"),
        Path("/System/Library/Fonts"),
        Path("/System/Library/Fonts/Supplemental"),
        Path("/usr/share/fonts"),
        Path("/usr/local/share/fonts"),
        Path("C:/Windows/Fonts"),
    ]

    candidates: list[Path] = []
    for base in font_dirs:
        if not base.exists():
            continue
        for ext in ("*.ttf", "*.otf", "*.ttc"):
            candidates.extend(sorted(base.rglob(ext)))

    for pattern in patterns:
        p = pattern.replace(" ", "")
        for path in candidates:
            stem = path.stem.lower().replace(" ", "")
            # Skip bold/oblique/mono variants when a plain face is available.
            if p == stem or stem == p + "-regular":
                return path
        for path in candidates:
            stem = path.stem.lower().replace(" ", "")
            if p in stem and "mono" not in stem and "bold" not in stem and "oblique" not in stem:
                return path
    return None
