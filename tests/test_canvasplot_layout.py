from __future__ import annotations

import unittest

from canvasplot.errors import PlotStateError
from canvasplot.geometry import Axes, Bounds, ensure_nonzero_span
from canvasplot.layout import (
    LEGEND_LOCATIONS,
    Margins,
    PlotTransform,
    RequestedLimits,
    anchored_text_position,
    legend_anchor,
    plot_size,
    resolve_axes,
)


def _bounds(xmin: float, xmax: float, ymin: float, ymax: float) -> Bounds:
    return Bounds(xmin=xmin, xmax=xmax, ymin=ymin, ymax=ymax)


class ResolveAxesTests(unittest.TestCase):
    def test_autoscale_pads_data_bounds(self) -> None:
        axes = resolve_axes(Axes(), _bounds(0.0, 10.0, 0.0, 5.0))
        self.assertAlmostEqual(axes.xmin, -0.5)
        self.assertAlmostEqual(axes.xmax, 10.5)
        self.assertAlmostEqual(axes.ymin, -0.25)
        self.assertAlmostEqual(axes.ymax, 5.25)

    def test_padding_does_not_accumulate_across_passes(self) -> None:
        axes = Axes(pad_frac=0.1)
        bounds = _bounds(0.0, 10.0, 0.0, 4.0)
        first = resolve_axes(axes, bounds).limits()
        second = resolve_axes(axes, bounds).limits()
        self.assertEqual(first, second)

    def test_single_point_is_widened_around_value(self) -> None:
        axes = resolve_axes(Axes(), _bounds(3.0, 3.0, 3.0, 3.0))
        self.assertAlmostEqual(axes.xmin, 2.997)
        self.assertAlmostEqual(axes.xmax, 3.003)
        self.assertAlmostEqual(axes.ymin, 2.997)
        self.assertAlmostEqual(axes.ymax, 3.003)

    def test_zero_value_uses_absolute_epsilon(self) -> None:
        self.assertEqual(ensure_nonzero_span(0.0, 0.0), (-1e-3, 1e-3))
        self.assertEqual(ensure_nonzero_span(1.0, 2.0), (1.0, 2.0))

    def test_empty_bounds_fall_back_to_unit_square(self) -> None:
        axes = resolve_axes(Axes(pad_frac=0.0), Bounds())
        self.assertEqual(axes.limits(), (0.0, 1.0, 0.0, 1.0))

    def test_equal_scale_widens_shorter_axis(self) -> None:
        axes = resolve_axes(Axes(pad_frac=0.0, equal_scale=True), _bounds(0.0, 10.0, 0.0, 2.0))
        self.assertAlmostEqual(axes.xmin, 0.0)
        self.assertAlmostEqual(axes.xmax, 10.0)
        self.assertAlmostEqual(axes.ymin, -4.0)
        self.assertAlmostEqual(axes.ymax, 6.0)
        self.assertAlmostEqual(axes.xspan, axes.yspan)

    def test_requested_limits_apply_only_without_autoscale(self) -> None:
        bounds = _bounds(0.0, 10.0, 0.0, 5.0)
        requested = RequestedLimits(x=(2.0, 4.0))

        fixed = resolve_axes(Axes(pad_frac=0.0, autoscale=False), bounds, requested)
        self.assertEqual(fixed.limits(), (2.0, 4.0, 0.0, 5.0))

        auto = resolve_axes(Axes(pad_frac=0.0, autoscale=True), bounds, requested)
        self.assertEqual(auto.limits(), (0.0, 10.0, 0.0, 5.0))


class PlotTransformTests(unittest.TestCase):
    def setUp(self) -> None:
        self.transform = PlotTransform(0.0, 10.0, 0.0, 5.0, width=640, height=480, margins=Margins())

    def test_corners_map_to_plot_area_edges(self) -> None:
        self.assertEqual(self.transform.data_to_pixel(0.0, 0.0), (60, 420))
        self.assertEqual(self.transform.data_to_pixel(10.0, 5.0), (620, 40))
        self.assertEqual(self.transform.data_to_pixel(5.0, 2.5), (340, 230))

    def test_pixel_to_data_inverts_mapping(self) -> None:
        x, y = self.transform.pixel_to_data(340, 230)
        self.assertAlmostEqual(x, 5.0)
        self.assertAlmostEqual(y, 2.5)

    def test_plot_corners_round_trip(self) -> None:
        for corner in ((60, 40), (620, 40), (60, 420), (620, 420)):
            with self.subTest(corner=corner):
                px, py = self.transform.data_to_pixel(*self.transform.pixel_to_data(*corner))
                self.assertLessEqual(abs(px - corner[0]), 1)
                self.assertLessEqual(abs(py - corner[1]), 1)

    def test_lengths_scale_with_plot_area(self) -> None:
        self.assertEqual(self.transform.plot_w, 560)
        self.assertEqual(self.transform.plot_h, 380)
        self.assertAlmostEqual(self.transform.length_x(1.0), 56.0)
        self.assertAlmostEqual(self.transform.length_y(1.0), 76.0)

    def test_zero_span_is_rejected(self) -> None:
        with self.assertRaises(PlotStateError):
            PlotTransform(1.0, 1.0, 0.0, 1.0, width=640, height=480, margins=Margins())

    def test_plot_size_rejects_tiny_figures(self) -> None:
        self.assertEqual(plot_size(640, 480, Margins()), (560, 380))
        with self.assertRaises(PlotStateError):
            plot_size(81, 200, Margins())


class LegendAnchorTests(unittest.TestCase):
    def _anchor(self, loc: str) -> tuple[int, int]:
        return legend_anchor(loc, 100, 50, width=640, height=480, margins=Margins())

    def test_known_positions(self) -> None:
        self.assertEqual(self._anchor("northWest"), (60, 40))
        self.assertEqual(self._anchor("northEast"), (520, 40))
        self.assertEqual(self._anchor("southWest"), (60, 370))
        self.assertEqual(self._anchor("southEast"), (520, 370))
        self.assertEqual(self._anchor("center"), (290, 205))
        self.assertEqual(self._anchor("north"), (290, 40))
        self.assertEqual(self._anchor("east"), (520, 205))

    def test_every_location_keeps_box_inside_plot_area(self) -> None:
        for loc in LEGEND_LOCATIONS:
            with self.subTest(loc=loc):
                x, y = self._anchor(loc)
                self.assertGreaterEqual(x, 60)
                self.assertGreaterEqual(y, 40)
                self.assertLessEqual(x + 100, 640 - 20)
                self.assertLessEqual(y + 50, 480 - 60)

    def test_unknown_location_falls_back_to_south_east(self) -> None:
        self.assertEqual(self._anchor("upperLeft"), self._anchor("southEast"))
        self.assertEqual(self._anchor(""), self._anchor("southEast"))


class AnchoredTextTests(unittest.TestCase):
    def test_alignment_offsets(self) -> None:
        size = (40, 10, 3)
        self.assertEqual(anchored_text_position((100, 100), size), (100, 100))
        self.assertEqual(anchored_text_position((100, 100), size, "center", "center"), (80, 105))
        self.assertEqual(anchored_text_position((100, 100), size, "right", "top"), (60, 110))
        self.assertEqual(anchored_text_position((100, 100), size, "left", "bottom"), (100, 97))


if __name__ == "__main__":
    unittest.main()
