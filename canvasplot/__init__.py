from canvasplot.api import figure
from canvasplot.commands import (
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
)
from canvasplot.errors import PlotDataError, PlotStateError
from canvasplot.figure import Figure, FigureStyle
from canvasplot.geometry import Axes, Bounds
from canvasplot.layout import Margins, PlotTransform, legend_anchor
from canvasplot.scales import TickSet, make_ticks, nice_number

__all__ = [
    "Axes",
    "Bounds",
    "Circle",
    "Command",
    "Ellipse",
    "Figure",
    "FigureStyle",
    "Line",
    "Margins",
    "PlotDataError",
    "PlotStateError",
    "PlotTransform",
    "Polygon",
    "RectLTRB",
    "RectXYWH",
    "RotatedRect",
    "Scatter",
    "ShapeStyle",
    "Text",
    "TickSet",
    "figure",
    "legend_anchor",
    "make_ticks",
    "nice_number",
]
