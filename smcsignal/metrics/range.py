from typing import Tuple
import numpy as np
from smcsignal.models import Volatility
from .types import Prices, RangeArray, round_price


def average_range(ranges: RangeArray, periods: int = 20) -> float:
    """
    Mean bar range over the trailing ``periods`` bars (clipped to available data).
    :param ranges: high - low per bar
    :param periods: trailing window
    :return: mean range, 0.0 for empty input
    """
    count = min(periods, len(ranges))
    if count == 0:
        return 0.0
    return float(np.mean(ranges[-count:]))


def support_resistance(high: Prices, low: Prices, window: int = 40) -> Tuple[float, float]:
    """
    Trailing support (lowest low) and resistance (highest high).
    :param high: High prices
    :param low: Low prices
    :param window: Trailing bars, clipped to available length
    :return: (support, resistance)
    :raise ValueError: on empty input
    """
    if len(high) == 0 or len(low) == 0:
        raise ValueError("support_resistance needs at least one bar")
    return round_price(np.min(low[-window:])), round_price(np.max(high[-window:]))


def classify_volatility(
    ranges: RangeArray,
    recent_window: int = 10,
    baseline_window: int = 20,
    high_ratio: float = 1.3,
    low_ratio: float = 0.7
) -> Volatility:
    """
    Compare the recent mean range with a longer baseline mean range.
    :param ranges: high - low per bar
    :param recent_window: Bars in the recent mean
    :param baseline_window: Bars in the baseline mean
    :param high_ratio: recent ≥ baseline × this → HIGH
    :param low_ratio: recent ≤ baseline × this → LOW
    :return: Volatility label; UNKNOWN without ``baseline_window`` bars
    """
    if len(ranges) < baseline_window:
        return Volatility.UNKNOWN

    baseline = float(np.mean(ranges[-baseline_window:]))
    recent = float(np.mean(ranges[-recent_window:]))

    # No movement at all over the baseline
    if baseline == 0:
        return Volatility.LOW
    if recent >= baseline * high_ratio:
        return Volatility.HIGH
    if recent <= baseline * low_ratio:
        return Volatility.LOW
    return Volatility.NORMAL
