from __future__ import annotations

import unittest

import numpy as np

from canvasplot.scales import format_tick, make_ticks, nice_number, tick_step


class NiceNumberTests(unittest.TestCase):
    def test_rounded_mantissa_snaps_to_nearest_candidate(self) -> None:
        self.assertEqual(nice_number(1.4, round_result=True), 1.0)
        self.assertEqual(nice_number(2.9, round_result=True), 2.0)
        self.assertEqual(nice_number(6.5, round_result=True), 5.0)
        self.assertEqual(nice_number(7.5, round_result=True), 10.0)

    def test_ceiling_mantissa_snaps_upward(self) -> None:
        self.assertEqual(nice_number(1.0, round_result=False), 1.0)
        self.assertEqual(nice_number(1.2, round_result=False), 2.0)
        self.assertEqual(nice_number(3.0, round_result=False), 5.0)
        self.assertEqual(nice_number(5.5, round_result=False), 10.0)
        self.assertAlmostEqual(nice_number(0.03, round_result=False), 0.05, places=12)

    def test_non_positive_range_is_treated_as_one(self) -> None:
        self.assertEqual(nice_number(0.0, round_result=False), 1.0)
        self.assertEqual(nice_number(-4.0, round_result=True), 1.0)

    def test_nice_number_is_idempotent(self) -> None:
        for value in (0.0007, 0.013, 0.3, 1.0, 2.5, 4.9, 17.0, 333.0, 8.1e5):
            for round_result in (True, False):
                once = nice_number(value, round_result=round_result)
                twice = nice_number(once, round_result=round_result)
                self.assertAlmostEqual(once, twice, delta=abs(once) * 1e-12)


class MakeTicksTests(unittest.TestCase):
    def test_zero_to_ten_uses_step_two(self) -> None:
        ticks = make_ticks(0.0, 10.0, 6)
        self.assertEqual(ticks.step, 2.0)
        self.assertEqual(ticks.locs, (0.0, 2.0, 4.0, 6.0, 8.0, 10.0))
        self.assertEqual(ticks.labels, ("0", "2", "4", "6", "8", "10"))

    def test_fractional_step_uses_one_decimal(self) -> None:
        ticks = make_ticks(0.0, 1.0)
        self.assertAlmostEqual(ticks.step, 0.2, places=12)
        self.assertEqual(ticks.labels, ("0.0", "0.2", "0.4", "0.6", "0.8", "1.0"))

    def test_ticks_are_clipped_to_the_span(self) -> None:
        ticks = make_ticks(0.5, 9.5, 6)
        self.assertEqual(ticks.locs, (2.0, 4.0, 6.0, 8.0))

    def test_tick_count_and_spacing_bounds(self) -> None:
        cases = [
            (-3.7, 12.2),
            (0.001, 0.0047),
            (-1e6, 2.5e6),
            (99.0, 101.0),
            (-0.5, 0.5),
            (2.997, 3.003),
            (1234.5, 98765.4),
        ]
        for lo, hi in cases:
            for target in (2, 3, 5, 6, 10):
                with self.subTest(lo=lo, hi=hi, target=target):
                    ticks = make_ticks(lo, hi, target)
                    self.assertGreaterEqual(len(ticks), 1)
                    self.assertLessEqual(len(ticks), target + 2)
                    locs = np.asarray(ticks.locs)
                    self.assertTrue(np.all(locs >= lo))
                    self.assertTrue(np.all(locs <= hi))
                    if locs.size > 1:
                        diffs = np.diff(locs)
                        self.assertTrue(np.all(diffs > 0))
                        self.assertTrue(np.allclose(diffs, ticks.step, rtol=1e-6, atol=0.0))

    def test_edge_ticks_are_clamped_into_the_window(self) -> None:
        low = make_ticks(1e-10, 10.0, 6)
        self.assertEqual(low.locs[0], 1e-10)
        self.assertEqual(low.labels[0], "0")

        high = make_ticks(0.0, 10.0 - 1e-10, 6)
        self.assertEqual(high.locs[-1], 10.0 - 1e-10)
        self.assertEqual(high.labels[-1], "10")
        self.assertEqual(len(high), 6)

    def test_iteration_pairs_locations_with_labels(self) -> None:
        pairs = list(make_ticks(0.0, 10.0))
        self.assertEqual(pairs[0], (0.0, "0"))
        self.assertEqual(pairs[-1], (10.0, "10"))

    def test_target_must_exceed_one(self) -> None:
        with self.assertRaises(ValueError):
            make_ticks(0.0, 1.0, 1)
        with self.assertRaises(ValueError):
            tick_step(0.0, 1.0, 0)

    def test_negative_zero_label_is_plain_zero(self) -> None:
        self.assertEqual(format_tick(-0.0, step=1.0), "0")
        self.assertEqual(format_tick(-0.04, step=0.5), "0.0")
        self.assertEqual(format_tick(-2.0, step=1.0), "-2")


if __name__ == "__main__":
    unittest.main()
