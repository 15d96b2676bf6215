# test_swings.py
import pytest
import numpy as np
from smcsignal.core.swings import detect_swing_masks, detect_swings
from smcsignal.models import SwingKind


def test_detect_swing_masks_positive():
    high = np.array([5, 8, 6, 9, 7, 10, 8], dtype=np.float64)
    low = np.array([4, 5, 4, 6, 5, 7, 6], dtype=np.float64)
    result = detect_swing_masks(high, low, lookback=1)
    assert result['is_swing_high'].dtype == bool
    assert result['is_swing_low'].dtype == bool
    assert np.flatnonzero(result['is_swing_high']).tolist() == [1, 3, 5]
    assert np.flatnonzero(result['is_swing_low']).tolist() == [2, 4]


def test_detect_swing_masks_negative_lookback_zero():
    high = low = np.ones(5)
    with pytest.raises(ValueError, match="lookback must be ≥ 1"):
        detect_swing_masks(high, low, lookback=0)


def test_detect_swing_masks_negative_shape_mismatch():
    with pytest.raises(ValueError, match="same length"):
        detect_swing_masks(np.ones(5), np.ones(4))


def test_detect_swing_masks_negative_non_numeric():
    with pytest.raises(TypeError, match="numeric"):
        detect_swing_masks(np.array(['a', 'b', 'c']), np.ones(3))


def test_detect_swing_masks_edge_empty():
    empty = np.array([], dtype=np.float64)
    result = detect_swing_masks(empty, empty, lookback=2)
    assert result['is_swing_high'].shape == (0,)
    assert result['is_swing_low'].shape == (0,)


def test_detect_swing_masks_edge_too_short():
    result = detect_swing_masks(np.array([1.0, 2.0]), np.array([0.5, 1.0]), lookback=2)
    assert not np.any(result['is_swing_high'])
    assert not np.any(result['is_swing_low'])


def test_detect_swing_masks_edge_all_same_price():
    price = np.full(10, 100.0)
    result = detect_swing_masks(price, price, lookback=2)
    assert not np.any(result['is_swing_high'])
    assert not np.any(result['is_swing_low'])


def test_detect_swing_masks_tie_is_not_a_swing():
    high = np.array([1.0, 3.0, 2.0, 3.0, 1.0, 0.5, 0.4])
    result = detect_swing_masks(high, high - 0.1, lookback=2)
    assert not result['is_swing_high'][1]
    assert not result['is_swing_high'][3]


def test_detect_swing_masks_edges_never_swing():
    high = np.array([9.0, 1.0, 2.0, 1.0, 9.0])
    result = detect_swing_masks(high, high - 0.5, lookback=1)
    assert not result['is_swing_high'][0]
    assert not result['is_swing_high'][-1]
    assert result['is_swing_high'][2]


def test_detect_swings_records(hl_arrays):
    highs = [13, 11.5, 14, 15, 12, 9.5, 14, 17, 16]
    lows = [12, 10, 12.5, 13, 10, 8, 12, 15, 14]
    swings = detect_swings(hl_arrays(highs, lows), lookback=1)

    assert [s.index for s in swings.highs] == [3, 7]
    assert [s.price for s in swings.highs] == [15.0, 17.0]
    assert [s.index for s in swings.lows] == [1, 5]
    assert [s.kind for s in swings.all] == [
        SwingKind.LOW, SwingKind.HIGH, SwingKind.LOW, SwingKind.HIGH
    ]
    assert swings.all[0].time == swings.lows[0].time


def test_detect_swings_outside_bar_orders_high_first(hl_arrays):
    """A bar that is both a swing high and low appears HIGH then LOW."""
    highs = [10.0, 12.0, 10.0]
    lows = [9.0, 8.0, 9.0]
    swings = detect_swings(hl_arrays(highs, lows), lookback=1)
    assert [(s.index, s.kind) for s in swings.all] == [(1, SwingKind.HIGH), (1, SwingKind.LOW)]
