from .canvas import alpha_composite, blend_mask, blit, draw_filled_rect, draw_hline, draw_vline, new_canvas
from .draw_lines import draw_polyline
from .draw_markers import draw_markers
from .draw_text import draw_text, render_text_image, text_metrics
from .layers import DirtyState, LabelCache, RenderState
from .surface import Canvas

__all__ = [
    "Canvas",
    "DirtyState",
    "LabelCache",
    "RenderState",
    "alpha_composite",
    "blend_mask",
    "blit",
    "draw_filled_rect",
    "draw_hline",
    "draw_vline",
    "draw_markers",
    "draw_polyline",
    "draw_text",
    "new_canvas",
    "render_text_image",
    "text_metrics",
]
