"""Moving averages and momentum oscillators: EMA, RSI, MACD."""
import numpy as np
import pandas as pd

from smcsignal.models import Bias, MACDResult
from .types import Prices, FloatArray, round_price


def ema_series(values: Prices, period: int) -> FloatArray:
    """
    Exponential moving average seeded with the first value.

    ``ema[i] = values[i] * k + ema[i-1] * (1 - k)`` with ``k = 2 / (period + 1)``,
    which is exactly pandas' ``ewm(span=period, adjust=False)``.
    """
    if period < 1:
        raise ValueError("period must be ≥1")
    values = np.asarray(values, dtype=np.float64)
    if len(values) == 0:
        return np.array([], dtype=np.float64)
    return pd.Series(values).ewm(span=period, adjust=False).mean().to_numpy()


def ema_value(values: Prices, period: int) -> float:
    """Final EMA term, rounded; 0.0 for empty input."""
    series = ema_series(values, period)
    if len(series) == 0:
        return 0.0
    return round_price(series[-1])


def compute_rsi(close: Prices, period: int = 14) -> float:
    """
    Relative Strength Index with Wilder smoothing.

    Args:
        close: Closing prices.
        period: Lookback (default 14).

    Returns:
        float in [0, 100]. 50.0 when fewer than ``period + 1`` closes exist;
        100.0 when the average loss is exactly zero.
    """
    close = np.asarray(close, dtype=np.float64)
    if len(close) < period + 1:
        return 50.0

    deltas = np.diff(close)
    gains = np.clip(deltas, 0.0, None)
    losses = np.clip(-deltas, 0.0, None)

    avg_gain = gains[:period].sum() / period
    avg_loss = losses[:period].sum() / period
    for gain, loss in zip(gains[period:], losses[period:]):
        avg_gain = (avg_gain * (period - 1) + gain) / period
        avg_loss = (avg_loss * (period - 1) + loss) / period

    if avg_loss == 0:
        return 100.0
    rsi = 100.0 - 100.0 / (1.0 + avg_gain / avg_loss)
    return round_price(rsi)


def compute_macd(close: Prices, fast: int = 12, slow: int = 26, signal: int = 9) -> MACDResult:
    """
    MACD line (fast EMA - slow EMA), its signal EMA and histogram.

    ``trending`` follows the sign of the rounded histogram.
    """
    close = np.asarray(close, dtype=np.float64)
    if len(close) == 0:
        return MACDResult()

    line = ema_series(close, fast) - ema_series(close, slow)
    signal_line = ema_series(line, signal)

    macd_value = round_price(line[-1])
    signal_value = round_price(signal_line[-1])
    histogram = round_price(line[-1] - signal_line[-1])

    if histogram > 0:
        trending = Bias.BULLISH
    elif histogram < 0:
        trending = Bias.BEARISH
    else:
        trending = Bias.NEUTRAL

    return MACDResult(macd=macd_value, signal=signal_value, histogram=histogram, trending=trending)
