# tests/metrics/test_atr.py
"""
Tests for true range and Wilder ATR.
"""
import numpy as np
import pytest
from smcsignal.metrics.atr import compute_atr, compute_atr_series, compute_true_range


HIGH = np.array([10.0, 12.0, 15.0, 14.0, 16.0])
LOW = np.array([8.0, 10.0, 12.0, 11.0, 13.0])
CLOSE = np.array([9.0, 11.0, 14.0, 13.0, 15.0])


class TestComputeTrueRange:
    """Positive and edge tests for compute_true_range."""

    # ========== POSITIVE TESTS ==========

    def test_basic_calculation(self):
        """Positive test: TR uses the previous close after the first bar."""
        tr = compute_true_range(HIGH, LOW, CLOSE)

        assert tr[0] == pytest.approx(2.0)  # H-L
        assert tr[1] == pytest.approx(3.0)  # max(H-L=2, |H-prevC|=3, |L-prevC|=1)
        assert tr[2] == pytest.approx(4.0)  # max(H-L=3, |H-prevC|=4, |L-prevC|=1)
        assert tr[3] == pytest.approx(3.0)
        assert tr[4] == pytest.approx(3.0)
        assert tr.dtype == np.float64

    def test_gap_scenarios(self):
        """Positive test: gaps widen the true range beyond high - low."""
        high = np.array([10, 15, 14, 9, 12], dtype=np.float64)
        low = np.array([9, 14, 13, 8, 11], dtype=np.float64)
        close = np.array([9.5, 14.5, 13.5, 8.5, 11.5], dtype=np.float64)

        tr = compute_true_range(high, low, close)

        assert tr[1] == pytest.approx(5.5)
        assert tr[3] == pytest.approx(5.5)

    # ========== EDGE TESTS ==========

    def test_integer_input_is_float64(self):
        tr = compute_true_range([10, 12], [8, 10], [9, 11])
        assert tr.dtype == np.float64
        assert list(tr) == [2.0, 3.0]

    def test_single_bar(self):
        assert list(compute_true_range([5.0], [4.0], [4.5])) == [1.0]

    def test_empty(self):
        assert compute_true_range(np.array([]), np.array([]), np.array([])).shape == (0,)


class TestComputeATR:

    def test_wilder_smoothing(self):
        """Seed is the mean of TR[1..period]; later values are Wilder-smoothed."""
        atr = compute_atr_series(HIGH, LOW, CLOSE, period=2)

        assert np.all(np.isnan(atr[:2]))
        assert atr[2] == pytest.approx(3.5)    # mean(3, 4)
        assert atr[3] == pytest.approx(3.25)   # (3.5 + 3) / 2
        assert atr[4] == pytest.approx(3.125)  # (3.25 + 3) / 2

    def test_scalar_is_last_value(self):
        assert compute_atr(HIGH, LOW, CLOSE, period=2) == pytest.approx(3.125)

    def test_insufficient_bars_returns_zero(self):
        assert compute_atr(HIGH, LOW, CLOSE, period=5) == 0.0

    def test_flat_prices_have_zero_atr(self):
        flat = np.full(30, 100.0)
        assert compute_atr(flat, flat, flat, period=14) == 0.0

    def test_invalid_period(self):
        with pytest.raises(ValueError, match="period must be ≥1"):
            compute_atr_series(HIGH, LOW, CLOSE, period=0)
