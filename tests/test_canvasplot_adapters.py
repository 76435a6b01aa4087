from __future__ import annotations

from decimal import Decimal
import importlib.util
import unittest

import numpy as np

from canvasplot.adapters import coerce_1d_numeric, coerce_xy
from canvasplot.errors import PlotDataError


class CoerceXYTests(unittest.TestCase):
    def test_lists_and_arrays_become_float64(self) -> None:
        x, y = coerce_xy([1, 2, 3], np.asarray([4, 5, 6], dtype=np.int32))
        self.assertEqual(x.dtype, np.float64)
        self.assertEqual(y.dtype, np.float64)
        self.assertEqual(y.tolist(), [4.0, 5.0, 6.0])

    def test_non_finite_pairs_are_dropped(self) -> None:
        x, y = coerce_xy([0.0, 1.0, np.inf, 3.0], [1.0, np.nan, 2.0, None])
        self.assertEqual(x.tolist(), [0.0])
        self.assertEqual(y.tolist(), [1.0])

    def test_decimal_values_are_accepted(self) -> None:
        x, _ = coerce_xy([Decimal("1.5"), Decimal("2.5")], [0, 1])
        self.assertEqual(x.tolist(), [1.5, 2.5])

    def test_invalid_input_raises_plot_data_error(self) -> None:
        with self.assertRaises(PlotDataError):
            coerce_xy([1.0, 2.0], [1.0])
        with self.assertRaises(PlotDataError):
            coerce_xy([], [])
        with self.assertRaises(PlotDataError):
            coerce_xy([np.nan], [1.0])
        with self.assertRaises(PlotDataError):
            coerce_xy(["a", "b"], [1.0, 2.0])
        with self.assertRaises(PlotDataError):
            coerce_1d_numeric(np.zeros((2, 2)), label="x")
        with self.assertRaises(PlotDataError):
            coerce_1d_numeric("12", label="x")

    def test_plot_data_error_is_a_value_error(self) -> None:
        with self.assertRaises(ValueError):
            coerce_xy([1.0], [1.0, 2.0])

    @unittest.skipUnless(importlib.util.find_spec("pandas") is not None, "pandas not installed")
    def test_pandas_series_input(self) -> None:
        import pandas as pd

        x, y = coerce_xy(pd.Series([1, 2]), pd.Series([3.0, None]))
        self.assertEqual(x.tolist(), [1.0])
        self.assertEqual(y.tolist(), [3.0])

    @unittest.skipUnless(importlib.util.find_spec("torch") is not None, "torch not installed")
    def test_torch_tensor_input(self) -> None:
        import torch

        x, y = coerce_xy(torch.tensor([1.0, 2.0]), torch.tensor([3, 4]))
        self.assertEqual(x.dtype, np.float64)
        self.assertEqual(y.tolist(), [3.0, 4.0])


if __name__ == "__main__":
    unittest.main()
