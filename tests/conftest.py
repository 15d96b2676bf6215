"""
Shared candle fixtures and record factories.
"""
from datetime import datetime, timedelta
from itertools import cycle
from typing import List

import numpy as np
import pytest

from smcsignal.metrics.candles import to_candle_arrays
from smcsignal.models import (
    Bias, Candle, IndicatorSet, MACDResult, Strength, TrendState, Volatility,
)

START = datetime(2024, 1, 1)


def build_candles(opens, highs, lows, closes) -> List[Candle]:
    """Hourly candles from parallel OHLC sequences."""
    return [
        Candle(time=START + timedelta(hours=i), open=float(o), high=float(h),
               low=float(l), close=float(c), volume=1000.0)
        for i, (o, h, l, c) in enumerate(zip(opens, highs, lows, closes))
    ]


def arrays_from_hl(highs, lows, closes=None, opens=None):
    """CandleArrays from highs/lows; open and close default to the bar midpoint."""
    highs = np.asarray(highs, dtype=np.float64)
    lows = np.asarray(lows, dtype=np.float64)
    mid = (highs + lows) / 2
    closes = mid if closes is None else closes
    opens = mid if opens is None else opens
    return to_candle_arrays(build_candles(opens, highs, lows, closes), 1)


@pytest.fixture
def flat_candles() -> List[Candle]:
    """60 candles with open = high = low = close = 100."""
    return build_candles(*[[100.0] * 60] * 4)


@pytest.fixture
def uptrend_candles() -> List[Candle]:
    """100 candles, each close 1.0 / 1.25 / 1.5 above the previous one."""
    closes, price = [], 100.0
    for _, step in zip(range(100), cycle((1.0, 1.25, 1.5))):
        price += step
        closes.append(price)
    closes = np.array(closes)
    opens = closes - 1.0
    return build_candles(opens, closes + 0.3, opens - 0.3, closes)


@pytest.fixture
def gap_candles() -> List[Candle]:
    """
    Flat base (high 100, low 98) then a bullish three-candle gap:
    c1.high = 100, c3.low = 105.
    """
    opens, highs, lows, closes = [99.0] * 48, [100.0] * 48, [98.0] * 48, [99.0] * 48
    # c2 (displacement candle) and c3
    opens += [101.0, 105.5]
    highs += [104.5, 107.0]
    lows += [100.5, 105.0]
    closes += [104.0, 106.5]
    # price holds above the gap
    for _ in range(5):
        opens.append(106.0)
        highs.append(107.5)
        lows.append(105.5)
        closes.append(107.0)
    return build_candles(opens, highs, lows, closes)


@pytest.fixture
def random_walk_candles() -> List[Candle]:
    """300 candles of a seeded random walk."""
    rng = np.random.default_rng(7)
    closes = 100 * np.exp(np.cumsum(rng.normal(0, 0.01, 300)))
    opens = np.concatenate([[100.0], closes[:-1]])
    spread = np.abs(rng.normal(0, 0.4, 300))
    highs = np.maximum(opens, closes) + spread
    lows = np.minimum(opens, closes) - spread
    return build_candles(opens, highs, lows, closes)


@pytest.fixture
def make_indicators():
    """Factory for IndicatorSet records with neutral defaults."""
    def _make(**overrides) -> IndicatorSet:
        values = dict(
            current_price=100.0,
            ema20=100.0,
            ema50=100.0,
            ema200=100.0,
            rsi=50.0,
            macd=MACDResult(),
            atr=2.0,
            support=95.0,
            resistance=105.0,
            ema20_series=(),
            ema50_series=(),
            trend=TrendState(Bias.NEUTRAL, Strength.WEAK),
            volatility_level=Volatility.NORMAL,
        )
        values.update(overrides)
        return IndicatorSet(**values)
    return _make


@pytest.fixture
def hl_arrays():
    return arrays_from_hl


@pytest.fixture
def ohlc_candles():
    return build_candles
