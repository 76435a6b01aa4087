from __future__ import annotations

import dataclasses
import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

import numpy as np

from canvasplot.adapters import coerce_xy
from canvasplot.commands import (
    BLACK,
    H_ALIGNS,
    RGBA,
    V_ALIGNS,
    WHITE,
    Circle,
    Command,
    Ellipse,
    Line,
    Polygon,
    RectLTRB,
    RectXYWH,
    RotatedRect,
    Scatter,
    ShapeStyle,
    Text,
    coerce_color,
)
from canvasplot.display import display, persist
from canvasplot.errors import PlotDataError, PlotStateError
from canvasplot.geometry import Axes, Bounds
from canvasplot.layout import (
    LegendLocation,
    Margins,
    PlotTransform,
    RequestedLimits,
    anchored_text_position,
    legend_anchor,
    plot_size,
    resolve_axes,
)
from canvasplot.raster import Canvas, DirtyState, LabelCache, RenderState
from canvasplot.raster.draw_shapes import rotated_rect_points
from canvasplot.raster.draw_text import DEFAULT_FONT_FAMILY
from canvasplot.scales import DEFAULT_TICK_TARGET, TickSet, make_ticks


LOGGER = logging.getLogger(__name__)

Color = tuple[int, int, int] | tuple[int, int, int, int]


@dataclass(frozen=True)
class FigureStyle:
    background: RGBA = WHITE
    axis_color: RGBA = BLACK
    grid_color: RGBA = (220, 220, 220, 255)
    text_color: RGBA = BLACK
    legend_background: RGBA = WHITE
    legend_border: RGBA = BLACK
    font_family: str = DEFAULT_FONT_FAMILY
    tick_font_scale: float = 0.4
    label_font_scale: float = 0.5
    title_font_scale: float = 0.6
    legend_font_scale: float = 0.4
    tick_target: int = DEFAULT_TICK_TARGET
    legend_swatch_w: int = 20
    legend_marker_radius: int = 4
    # Horizontal distance from the plot's left edge to the rotated y label.
    ylabel_offset: int = 55

    def __post_init__(self) -> None:
        if self.tick_target <= 1:
            raise ValueError("tick_target must be > 1")


@dataclass(frozen=True)
class LegendBox:
    x: int
    y: int
    width: int
    height: int
    row_height: int


@dataclass(eq=False)
class Figure:
    """Retained-command figure.

    Command and setter calls only record state and mark the figure dirty;
    pixels are produced by :meth:`render`, which :meth:`show` and
    :meth:`save` call on demand. Malformed command input is logged and
    dropped unless the figure was created with ``strict=True``.
    """

    width: int = 640
    height: int = 480
    style: FigureStyle = field(default_factory=FigureStyle)
    margins: Margins = field(default_factory=Margins)
    strict: bool = False

    _commands: list[Command] = field(default_factory=list)
    _axes: Axes = field(default_factory=Axes)
    _bounds: Bounds = field(default_factory=Bounds)
    _requested: RequestedLimits = field(default_factory=RequestedLimits)
    _title: str = ""
    _xlabel: str = ""
    _ylabel: str = ""
    _legend_on: bool = False
    _legend_loc: str = "northEast"
    _dirty: DirtyState = field(default_factory=DirtyState)
    _ylabel_cache: LabelCache = field(default_factory=LabelCache)
    _canvas: Canvas | None = None
    _transform: PlotTransform | None = None
    _last_ticks: tuple[TickSet, TickSet] | None = None
    _legend_box: LegendBox | None = None

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("width and height must be > 0")
        plot_size(self.width, self.height, self.margins)
        self._canvas = Canvas(
            self.width,
            self.height,
            background=self.style.background,
            font_family=self.style.font_family,
        )

    # ------------------------------------------------------------------
    # commands

    def plot(
        self,
        x: Any,
        y: Any,
        *,
        color: Color = (0, 0, 255),
        width: float = 1.0,
        label: str = "",
    ) -> "Figure":
        def build() -> Command:
            xs, ys = coerce_xy(x, y)
            return Line(xs, ys, color=coerce_color(color), width=float(width), label=label)

        return self._add("line", build)

    line = plot

    def scatter(
        self,
        x: Any,
        y: Any,
        *,
        color: Color = (255, 0, 0),
        marker_size: float = 4.0,
        label: str = "",
    ) -> "Figure":
        def build() -> Command:
            xs, ys = coerce_xy(x, y)
            return Scatter(xs, ys, color=coerce_color(color), marker_size=float(marker_size), label=label)

        return self._add("scatter", build)

    def text(
        self,
        x: float,
        y: float,
        text: str,
        *,
        color: Color = (0, 0, 0),
        font_scale: float = 0.4,
        weight: int = 1,
        halign: str = "left",
        valign: str = "baseline",
        label: str = "",
    ) -> "Figure":
        def build() -> Command:
            _require_finite("text anchor", x, y)
            if halign not in H_ALIGNS:
                raise PlotDataError(f"unsupported horizontal alignment: {halign}")
            if valign not in V_ALIGNS:
                raise PlotDataError(f"unsupported vertical alignment: {valign}")
            return Text(
                float(x),
                float(y),
                str(text),
                color=coerce_color(color),
                font_scale=float(font_scale),
                weight=max(1, int(weight)),
                halign=halign,  # type: ignore[arg-type]
                valign=valign,  # type: ignore[arg-type]
                label=label,
            )

        return self._add("text", build)

    def circle(self, cx: float, cy: float, radius: float, style: ShapeStyle | None = None, *, label: str = "") -> "Figure":
        def build() -> Command:
            _require_finite("circle", cx, cy, radius)
            return Circle(float(cx), float(cy), abs(float(radius)), style=style or ShapeStyle(), label=label)

        return self._add("circle", build)

    def rect_ltrb(
        self,
        x0: float,
        y0: float,
        x1: float,
        y1: float,
        style: ShapeStyle | None = None,
        *,
        label: str = "",
    ) -> "Figure":
        def build() -> Command:
            _require_finite("rectangle", x0, y0, x1, y1)
            return RectLTRB(float(x0), float(y0), float(x1), float(y1), style=style or ShapeStyle(), label=label)

        return self._add("rect_ltrb", build)

    def rect_xywh(
        self,
        x: float,
        y: float,
        w: float,
        h: float,
        style: ShapeStyle | None = None,
        *,
        label: str = "",
    ) -> "Figure":
        def build() -> Command:
            _require_finite("rectangle", x, y, w, h)
            return RectXYWH.from_xywh(float(x), float(y), float(w), float(h), style=style or ShapeStyle(), label=label)

        return self._add("rect_xywh", build)

    def rotated_rect(
        self,
        cx: float,
        cy: float,
        w: float,
        h: float,
        angle_deg: float = 0.0,
        style: ShapeStyle | None = None,
        *,
        label: str = "",
    ) -> "Figure":
        def build() -> Command:
            _require_finite("rotated rectangle", cx, cy, w, h, angle_deg)
            return RotatedRect(
                float(cx),
                float(cy),
                float(w),
                float(h),
                float(angle_deg),
                style=style or ShapeStyle(),
                label=label,
            )

        return self._add("rotated_rect", build)

    def polygon(self, x: Any, y: Any, style: ShapeStyle | None = None, *, label: str = "") -> "Figure":
        def build() -> Command:
            xs, ys = coerce_xy(x, y)
            return Polygon(xs, ys, style=style or ShapeStyle(), label=label)

        return self._add("polygon", build)

    def ellipse(
        self,
        cx: float,
        cy: float,
        w: float,
        h: float,
        angle_deg: float = 0.0,
        style: ShapeStyle | None = None,
        *,
        label: str = "",
    ) -> "Figure":
        def build() -> Command:
            _require_finite("ellipse", cx, cy, w, h, angle_deg)
            return Ellipse(
                float(cx),
                float(cy),
                abs(float(w)),
                abs(float(h)),
                float(angle_deg),
                style=style or ShapeStyle(),
                label=label,
            )

        return self._add("ellipse", build)

    def _add(self, kind: str, build: Callable[[], Command]) -> "Figure":
        try:
            cmd = build()
        except PlotDataError as exc:
            if self.strict:
                raise
            LOGGER.warning("dropping %s command: %s", kind, exc)
            return self
        cmd.expand_bounds(self._bounds)
        self._commands.append(cmd)
        self._dirty.mark_dirty()
        return self

    # ------------------------------------------------------------------
    # axis and decoration settings

    def set_xlim(self, lo: float, hi: float) -> "Figure":
        limits = self._checked_limits("x", lo, hi)
        if limits is None:
            return self
        self._requested = dataclasses.replace(self._requested, x=limits)
        self._axes.autoscale = False
        self._dirty.mark_dirty()
        return self

    def set_ylim(self, lo: float, hi: float) -> "Figure":
        limits = self._checked_limits("y", lo, hi)
        if limits is None:
            return self
        self._requested = dataclasses.replace(self._requested, y=limits)
        self._axes.autoscale = False
        self._dirty.mark_dirty()
        return self

    def axis_tight(self) -> "Figure":
        return self.axis_pad(0.0)

    def axis_pad(self, frac: float) -> "Figure":
        self._axes.pad_frac = max(0.0, float(frac)) if math.isfinite(frac) else 0.0
        self._dirty.mark_dirty()
        return self

    def autoscale(self, on: bool = True) -> "Figure":
        self._axes.autoscale = bool(on)
        self._dirty.mark_dirty()
        return self

    def equal_scale(self, on: bool = True) -> "Figure":
        self._axes.equal_scale = bool(on)
        self._dirty.mark_dirty()
        return self

    def grid(self, on: bool = True) -> "Figure":
        self._axes.grid = bool(on)
        self._dirty.mark_dirty()
        return self

    def title(self, text: str) -> "Figure":
        self._title = str(text)
        self._dirty.mark_dirty()
        return self

    def xlabel(self, text: str) -> "Figure":
        self._xlabel = str(text)
        self._dirty.mark_dirty()
        return self

    def ylabel(self, text: str) -> "Figure":
        text = str(text)
        if text != self._ylabel:
            self._ylabel_cache.invalidate()
        self._ylabel = text
        self._dirty.mark_dirty()
        return self

    def legend(self, on: bool = True, loc: LegendLocation | str = "northEast") -> "Figure":
        self._legend_on = bool(on)
        self._legend_loc = str(loc)
        self._dirty.mark_dirty()
        return self

    def _checked_limits(self, axis: str, lo: float, hi: float) -> tuple[float, float] | None:
        if not (math.isfinite(lo) and math.isfinite(hi)):
            if self.strict:
                raise PlotDataError(f"{axis} limits must be finite")
            LOGGER.warning("ignoring non-finite %s limits (%r, %r)", axis, lo, hi)
            return None
        lo, hi = float(lo), float(hi)
        return (min(lo, hi), max(lo, hi))

    # ------------------------------------------------------------------
    # introspection

    @property
    def state(self) -> RenderState:
        return self._dirty.state

    @property
    def render_passes(self) -> int:
        return self._dirty.passes

    @property
    def commands(self) -> tuple[Command, ...]:
        return tuple(self._commands)

    @property
    def bounds(self) -> Bounds:
        return dataclasses.replace(self._bounds)

    @property
    def axes(self) -> Axes:
        return dataclasses.replace(self._axes)

    @property
    def ylabel_cache_builds(self) -> int:
        return self._ylabel_cache.builds

    def last_ticks(self) -> tuple[TickSet, TickSet] | None:
        return self._last_ticks

    def last_transform(self) -> PlotTransform | None:
        return self._transform

    def legend_bounds(self) -> tuple[int, int, int, int] | None:
        box = self._legend_box
        if box is None:
            return None
        return (box.x, box.y, box.width, box.height)

    # ------------------------------------------------------------------
    # lifecycle

    def render(self) -> bool:
        """Run the render pipeline if the figure is dirty.

        Returns ``True`` when a pass ran and ``False`` when the canvas was
        already current.
        """
        if not self._dirty.dirty:
            return False
        canvas = self._require_canvas()

        axes = resolve_axes(self._axes, self._bounds, self._requested)
        transform = PlotTransform.from_axes(axes, self.width, self.height, self.margins)
        x_ticks = make_ticks(axes.xmin, axes.xmax, self.style.tick_target)
        y_ticks = make_ticks(axes.ymin, axes.ymax, self.style.tick_target)

        canvas.clear(self.style.background)
        if axes.grid:
            self._draw_grid(canvas, transform, x_ticks, y_ticks)
        self._draw_axes(canvas, transform, x_ticks, y_ticks)
        for cmd in self._commands:
            self._draw_command(canvas, transform, cmd)
        self._legend_box = self._draw_legend(canvas) if self._legend_on else None
        self._draw_labels(canvas, transform)

        self._transform = transform
        self._last_ticks = (x_ticks, y_ticks)
        self._dirty.mark_clean()
        LOGGER.debug(
            "rendered %d commands into x=[%g, %g] y=[%g, %g]",
            len(self._commands),
            axes.xmin,
            axes.xmax,
            axes.ymin,
            axes.ymax,
        )
        return True

    def to_rgba(self) -> np.ndarray:
        self.render()
        return self._require_canvas().rgba.copy()

    def show(self, title: str = "Figure") -> None:
        self.render()
        display(self._require_canvas().rgba, title)

    def save(self, path: str | Path) -> Path:
        self.render()
        return persist(self._require_canvas().rgba, path)

    def _require_canvas(self) -> Canvas:
        if self._canvas is None:
            raise PlotStateError("figure canvas is not initialized")
        return self._canvas

    # ------------------------------------------------------------------
    # drawing

    def _draw_grid(self, canvas: Canvas, transform: PlotTransform, x_ticks: TickSet, y_ticks: TickSet) -> None:
        color = self.style.grid_color
        for xv in x_ticks.locs:
            if xv < transform.xmin or xv > transform.xmax:
                continue
            canvas.stroke_line(transform.data_to_pixel(xv, transform.ymin), transform.data_to_pixel(xv, transform.ymax), color)
        for yv in y_ticks.locs:
            if yv < transform.ymin or yv > transform.ymax:
                continue
            canvas.stroke_line(transform.data_to_pixel(transform.xmin, yv), transform.data_to_pixel(transform.xmax, yv), color)

    def _draw_axes(self, canvas: Canvas, transform: PlotTransform, x_ticks: TickSet, y_ticks: TickSet) -> None:
        m = self.margins
        color = self.style.axis_color
        scale = self.style.tick_font_scale
        baseline_y = self.height - m.bottom

        canvas.stroke_line((m.left, baseline_y), (self.width - m.right, baseline_y), color)
        for xv, label in x_ticks:
            px, py = transform.data_to_pixel(xv, transform.ymin)
            canvas.stroke_line((px, py), (px, py + m.tick_len), color)
            w, h, _ = canvas.measure_text(label, scale)
            canvas.draw_text(label, (px - w // 2, py + m.tick_len + 4 + h), scale, self.style.text_color)

        canvas.stroke_line((m.left, m.top), (m.left, baseline_y), color)
        for yv, label in y_ticks:
            px, py = transform.data_to_pixel(transform.xmin, yv)
            canvas.stroke_line((px - m.tick_len, py), (px, py), color)
            w, h, _ = canvas.measure_text(label, scale)
            canvas.draw_text(label, (px - m.tick_len - 4 - w, py + h // 2), scale, self.style.text_color)

    def _draw_command(self, canvas: Canvas, transform: PlotTransform, cmd: Command) -> None:
        if isinstance(cmd, Line):
            points = _pixel_points(transform, cmd.x, cmd.y)
            for p0, p1 in zip(points[:-1], points[1:]):
                canvas.stroke_line(p0, p1, cmd.color, cmd.width)
        elif isinstance(cmd, Scatter):
            canvas.fill_markers(_pixel_points(transform, cmd.x, cmd.y), int(cmd.marker_size), cmd.color)
        elif isinstance(cmd, Text):
            size = canvas.measure_text(cmd.text, cmd.font_scale, cmd.weight)
            anchor = anchored_text_position(transform.data_to_pixel(cmd.x, cmd.y), size, cmd.halign, cmd.valign)
            canvas.draw_text(cmd.text, anchor, cmd.font_scale, cmd.color, cmd.weight)
        elif isinstance(cmd, Circle):
            center = transform.data_to_pixel(cmd.cx, cmd.cy)
            radius = int(transform.length_x(cmd.radius))
            self._paint_shape(
                canvas,
                cmd.style,
                lambda c: c.fill_circle(center, radius, cmd.style.fill_color),
                lambda c: c.stroke_circle(center, radius, cmd.style.stroke_color, cmd.style.stroke_width),
            )
        elif isinstance(cmd, (RectLTRB, RectXYWH)):
            p0 = transform.data_to_pixel(cmd.x0, cmd.y0)
            p1 = transform.data_to_pixel(cmd.x1, cmd.y1)
            self._paint_shape(
                canvas,
                cmd.style,
                lambda c: c.fill_rect(p0, p1, cmd.style.fill_color),
                lambda c: c.stroke_rect(p0, p1, cmd.style.stroke_color, cmd.style.stroke_width),
            )
        elif isinstance(cmd, RotatedRect):
            size = (transform.length_x(cmd.width), transform.length_y(cmd.height))
            corners = rotated_rect_points(transform.data_to_pixel(cmd.cx, cmd.cy), size, cmd.angle_deg)
            self._paint_shape(
                canvas,
                cmd.style,
                lambda c: c.fill_polygon(corners, cmd.style.fill_color),
                lambda c: c.stroke_polyline(corners, cmd.style.stroke_color, cmd.style.stroke_width, closed=True),
            )
        elif isinstance(cmd, Polygon):
            vertices = _pixel_points(transform, cmd.x, cmd.y)
            self._paint_shape(
                canvas,
                cmd.style,
                lambda c: c.fill_polygon(vertices, cmd.style.fill_color),
                lambda c: c.stroke_polyline(vertices, cmd.style.stroke_color, cmd.style.stroke_width, closed=True),
            )
        elif isinstance(cmd, Ellipse):
            center = transform.data_to_pixel(cmd.cx, cmd.cy)
            semi_axes = (
                float(int(0.5 * transform.length_x(cmd.width))),
                float(int(0.5 * transform.length_y(cmd.height))),
            )
            self._paint_shape(
                canvas,
                cmd.style,
                lambda c: c.fill_ellipse(center, semi_axes, cmd.angle_deg, cmd.style.fill_color),
                lambda c: c.stroke_ellipse(center, semi_axes, cmd.angle_deg, cmd.style.stroke_color, cmd.style.stroke_width),
            )
        else:
            raise PlotStateError(f"unknown command type: {type(cmd).__name__}")

    @staticmethod
    def _paint_shape(
        canvas: Canvas,
        style: ShapeStyle,
        fill: Callable[[Canvas], None],
        stroke: Callable[[Canvas], None],
    ) -> None:
        if style.translucent:
            scratch = canvas.clone()
            fill(scratch)
            canvas.alpha_composite(scratch, style.fill_alpha)
        elif style.has_fill:
            fill(canvas)
        # Outlines are always opaque.
        if style.has_stroke:
            stroke(canvas)

    def _layout_legend(self, canvas: Canvas, items: list[Command]) -> LegendBox:
        scale = self.style.legend_font_scale
        max_text_w = 0
        text_h = 0
        for cmd in items:
            w, h, baseline = canvas.measure_text(cmd.label, scale)
            max_text_w = max(max_text_w, w)
            text_h = max(text_h, h + baseline)
        row_h = text_h + 6
        box_w = self.style.legend_swatch_w + 8 + max_text_w + 10
        box_h = row_h * len(items) + 10
        x, y = legend_anchor(
            self._legend_loc,
            box_w,
            box_h,
            width=self.width,
            height=self.height,
            margins=self.margins,
        )
        return LegendBox(x=x, y=y, width=box_w, height=box_h, row_height=row_h)

    def _draw_legend(self, canvas: Canvas) -> LegendBox | None:
        items = [cmd for cmd in self._commands if cmd.label]
        if not items:
            return None
        box = self._layout_legend(canvas, items)
        top_left = (box.x, box.y)
        bottom_right = (box.x + box.width - 1, box.y + box.height - 1)
        canvas.fill_rect(top_left, bottom_right, self.style.legend_background)
        canvas.stroke_rect(top_left, bottom_right, self.style.legend_border, 1)

        sw = self.style.legend_swatch_w
        r = self.style.legend_marker_radius
        scale = self.style.legend_font_scale
        for i, cmd in enumerate(items):
            y = box.y + 5 + i * box.row_height + box.row_height // 2
            x0 = box.x + 5
            color = cmd.legend_color
            if isinstance(cmd, Line):
                canvas.stroke_line((x0, y), (x0 + sw, y), color, 2)
            elif isinstance(cmd, (Scatter, Circle)):
                canvas.fill_circle((x0 + sw // 2, y), r, color)
            else:
                canvas.fill_rect((x0, y - r), (x0 + sw, y + r), color)
            _, h, _ = canvas.measure_text(cmd.label, scale)
            canvas.draw_text(cmd.label, (x0 + sw + 8, y + h // 2), scale, self.style.text_color)
        return box

    def _draw_labels(self, canvas: Canvas, transform: PlotTransform) -> None:
        m = self.margins
        style = self.style
        if self._title:
            canvas.draw_text(self._title, (m.title_offset, m.title_offset // 2), style.title_font_scale, style.text_color)
        if self._xlabel:
            w, _, _ = canvas.measure_text(self._xlabel, style.label_font_scale)
            x = m.left + (transform.plot_w - w) // 2
            canvas.draw_text(self._xlabel, (x, self.height - 10), style.label_font_scale, style.text_color)
        self._draw_ylabel(canvas, transform)

    def _draw_ylabel(self, canvas: Canvas, transform: PlotTransform) -> None:
        if not self._ylabel:
            return
        cache = self._ylabel_cache
        if not cache.valid or cache.image is None or cache.text != self._ylabel:
            tile = canvas.render_text_image(
                self._ylabel,
                self.style.label_font_scale,
                self.style.text_color,
                self.style.background,
            )
            cache.store(self._ylabel, canvas.rotate_90(tile))
        image = cache.image
        assert image is not None
        rows, cols = image.shape[:2]
        x = self.margins.left - self.style.ylabel_offset
        y = self.margins.top + (transform.plot_h - rows) // 2
        # The label is skipped rather than clipped when it does not fit.
        if x >= 0 and y >= 0 and x + cols <= self.width and y + rows <= self.height:
            canvas.blit(image, (x, y))


def _require_finite(what: str, *values: float) -> None:
    for value in values:
        try:
            ok = math.isfinite(value)
        except TypeError as exc:
            raise PlotDataError(f"{what} expects numbers, got {value!r}") from exc
        if not ok:
            raise PlotDataError(f"{what} values must be finite")


def _pixel_points(transform: PlotTransform, xs: np.ndarray, ys: np.ndarray) -> list[tuple[int, int]]:
    return [transform.data_to_pixel(x, y) for x, y in zip(xs.tolist(), ys.tolist(), strict=True)]
