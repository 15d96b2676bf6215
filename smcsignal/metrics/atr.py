import numpy as np
from .types import Prices, ATRArray, FloatArray, round_price


def compute_true_range(high: Prices, low: Prices, close: Prices) -> FloatArray:
    """
    True range per bar: ``max(H - L, |H - prevC|, |L - prevC|)``.

    Bar 0 has no previous close and uses ``H - L``. Inputs are the validated
    float64 columns of ``CandleArrays``.
    """
    high = np.asarray(high, dtype=np.float64)
    low = np.asarray(low, dtype=np.float64)
    close = np.asarray(close, dtype=np.float64)

    tr = high - low
    if len(tr) > 1:
        prev_close = close[:-1]
        tr[1:] = np.maximum.reduce([
            tr[1:],
            np.abs(high[1:] - prev_close),
            np.abs(low[1:] - prev_close),
        ])
    return tr


def compute_atr_series(high: Prices, low: Prices, close: Prices, period: int = 14) -> ATRArray:
    """
    Wilder's Average True Range per bar.

    Only bars with a previous close contribute a true range, so the first
    ATR value sits at index ``period`` (seeded with the mean of TR[1..period]).

    Args:
        high: 1D array of high prices.
        low: 1D array of low prices.
        close: 1D array of closing prices.
        period: Smoothing window (≥1). Default is 14.

    Returns:
        ATRArray: float64, NaN for the first ``period`` entries.

    Raises:
        ValueError: If `period < 1`.

    Notes:
        - Smoothing follows Wilder’s formula:
          ATR[i] = (ATR[i-1] * (period - 1) + TR[i]) / period
    """
    if period < 1:
        raise ValueError("period must be ≥1")

    tr = compute_true_range(high, low, close)
    n = len(tr)
    atr = np.full(n, np.nan, dtype=np.float64)

    # === INSUFFICIENT DATA ===
    if n < period + 1:
        return atr

    # === INITIAL VALUE (SMA) ===
    atr[period] = np.mean(tr[1:period + 1])

    # === RECURSIVE SMOOTHING ===
    for i in range(period + 1, n):
        atr[i] = (atr[i - 1] * (period - 1) + tr[i]) / period

    return atr


def compute_atr(high: Prices, low: Prices, close: Prices, period: int = 14) -> float:
    """Latest ATR value rounded to output precision; 0.0 without ``period + 1`` bars."""
    atr = compute_atr_series(high, low, close, period)
    if len(atr) == 0 or np.isnan(atr[-1]):
        return 0.0
    return round_price(atr[-1])
