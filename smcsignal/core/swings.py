# core/swings.py
"""
Swing point detection: strict local extrema over a symmetric window.
Vectorized with SciPy neighbourhood filters.
"""
from typing import Dict
import numpy as np
from scipy.ndimage import maximum_filter, minimum_filter
from smcsignal.metrics.candles import CandleArrays
from smcsignal.metrics.types import Prices, SwingsMask, round_price
from smcsignal.models import SwingKind, SwingPoint, SwingSet


def detect_swing_masks(
        high: Prices,
        low: Prices,
        lookback: int = 3
) -> Dict[str, SwingsMask]:
    """
    Flag bars whose high (low) strictly exceeds every other bar in ``[i-L, i+L]``.

    Parameters
    ----------
    high : Prices
        1D array of high prices.
    low : Prices
        1D array of low prices.
    lookback : int, default=3
        Bars to left/right (L).

    Returns
    -------
    dict with keys:
        - 'is_swing_high': bool array
        - 'is_swing_low': bool array

    Pre-conditions
    --------------
    - `high` and `low` must be 1D, same length, numeric.
    - `lookback` ≥ 1.

    Post-conditions
    ---------------
    - Edge bars (first/last `lookback`) are never swings.
    - Ties with any neighbour disqualify the bar (no plateaus).
    - A bar may be both a swing high and a swing low (outside bar).

    Raises
    ------
    ValueError
        If inputs violate shape or lookback constraints.
    TypeError
        If inputs are non-numeric.
    """
    # === PRECONDITIONS: VALIDATE INPUTS ===
    if lookback < 1:
        raise ValueError("Precondition violated: lookback must be ≥ 1")
    if high.shape != low.shape or high.ndim != 1:
        raise ValueError("Precondition violated: inputs must be 1D arrays of same length")
    if not (np.issubdtype(high.dtype, np.number) and np.issubdtype(low.dtype, np.number)):
        raise TypeError("Precondition violated: inputs must be numeric")

    n = len(high)
    if n < 2 * lookback + 1:
        empty = np.zeros(n, dtype=bool)
        return {'is_swing_high': empty, 'is_swing_low': empty.copy()}

    high = high.astype(np.float64, copy=False)
    low = low.astype(np.float64, copy=False)

    # === NEIGHBOUR EXTREMES (CENTRE EXCLUDED) ===
    footprint = np.ones(2 * lookback + 1, dtype=bool)
    footprint[lookback] = False
    neighbour_max = maximum_filter(high, footprint=footprint, mode='constant', cval=-np.inf)
    neighbour_min = minimum_filter(low, footprint=footprint, mode='constant', cval=np.inf)

    sh = high > neighbour_max
    sl = low < neighbour_min

    # Invalidate edges
    sh[:lookback] = False
    sh[-lookback:] = False
    sl[:lookback] = False
    sl[-lookback:] = False

    return {'is_swing_high': sh, 'is_swing_low': sl}


def detect_swings(candles: CandleArrays, lookback: int = 3) -> SwingSet:
    """
    Swing points as records: highs, lows, and both merged by index.

    At an equal index the HIGH precedes the LOW in the merged list.
    """
    masks = detect_swing_masks(candles.high, candles.low, lookback)
    highs = tuple(
        SwingPoint(int(i), round_price(candles.high[i]), candles.times[i], SwingKind.HIGH)
        for i in np.flatnonzero(masks['is_swing_high'])
    )
    lows = tuple(
        SwingPoint(int(i), round_price(candles.low[i]), candles.times[i], SwingKind.LOW)
        for i in np.flatnonzero(masks['is_swing_low'])
    )
    merged = sorted(highs + lows, key=lambda s: (s.index, s.kind is SwingKind.LOW))
    return SwingSet(highs=highs, lows=lows, all=tuple(merged))
