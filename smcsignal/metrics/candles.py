# smcsignal/metrics/candles.py
"""
Candle ingestion: validation and conversion to shared float64 arrays.

Validation happens once, at the top of the pipeline, before any indicator
runs. Every later stage reads from the same ``CandleArrays``.
"""
from dataclasses import dataclass
from numbers import Real
from typing import Any, Iterable, Mapping, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from smcsignal.errors import InvalidInputError
from smcsignal.models import Candle
from .types import Prices, RangeArray

OHLC = ('open', 'high', 'low', 'close')

CandleInput = Union[pd.DataFrame, Sequence[Candle], Sequence[Mapping[str, Any]]]


@dataclass(frozen=True)
class CandleArrays:
    """Column view of a validated candle sequence."""
    open: Prices
    high: Prices
    low: Prices
    close: Prices
    volume: Prices
    times: Tuple[Any, ...]
    ranges: RangeArray

    def __len__(self) -> int:
        return len(self.close)

    @property
    def current_price(self) -> float:
        return float(self.close[-1])


def _field(candle: Any, name: str, default: Any = None) -> Any:
    if isinstance(candle, Mapping):
        return candle.get(name, default)
    return getattr(candle, name, default)


def _check_price(value: Any, name: str, idx: int) -> float:
    # bool is a Real subclass but never a price
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidInputError(f"Candle {idx}: '{name}' must be numeric, got {value!r}")
    value = float(value)
    if not np.isfinite(value) or value <= 0:
        raise InvalidInputError(f"Candle {idx}: '{name}' must be a positive finite number, got {value}")
    return value


def _rows_from_frame(df: pd.DataFrame) -> Iterable[Mapping[str, Any]]:
    missing = set(OHLC) - set(df.columns)
    if missing:
        raise InvalidInputError(f"Missing required columns: {sorted(missing)}")
    frame = df
    if 'time' not in df.columns and isinstance(df.index, pd.DatetimeIndex):
        frame = df.assign(time=df.index)
    return frame.to_dict('records')


def to_candle_arrays(candles: CandleInput, min_candles: int) -> CandleArrays:
    """
    Validate a candle sequence and convert it to float64 arrays.

    Parameters
    ----------
    candles : DataFrame | sequence of Candle | sequence of mappings
        Ascending by time. DataFrames need ``open/high/low/close`` columns;
        a ``DatetimeIndex`` supplies ``time`` when no column does.
    min_candles : int
        Minimum accepted length.

    Returns
    -------
    CandleArrays

    Raises
    ------
    InvalidInputError
        If the sequence is shorter than ``min_candles``, any OHLC value is
        non-numeric, non-finite or ≤ 0, a volume is negative, or times decrease.
    """
    if isinstance(candles, pd.DataFrame):
        rows = list(_rows_from_frame(candles))
    elif candles is None or isinstance(candles, (str, bytes, Mapping)):
        raise InvalidInputError("Candles must be a sequence of candles or a DataFrame")
    else:
        rows = list(candles)

    n = len(rows)
    if n < min_candles:
        raise InvalidInputError(f"Need at least {min_candles} candles, got {n}")

    ohlc = np.empty((4, n), dtype=np.float64)
    volume = np.zeros(n, dtype=np.float64)
    times = []
    for i, row in enumerate(rows):
        for j, name in enumerate(OHLC):
            ohlc[j, i] = _check_price(_field(row, name), name, i)
        vol = _field(row, 'volume', 0.0)
        if vol is None or (isinstance(vol, float) and np.isnan(vol)):
            vol = 0.0
        if isinstance(vol, bool) or not isinstance(vol, Real) or vol < 0:
            raise InvalidInputError(f"Candle {i}: 'volume' must be a non-negative number, got {vol!r}")
        volume[i] = float(vol)
        times.append(_field(row, 'time'))

    _check_time_order(times)

    open_, high, low, close = ohlc
    return CandleArrays(
        open=open_,
        high=high,
        low=low,
        close=close,
        volume=volume,
        times=tuple(times),
        ranges=high - low,
    )


def _check_time_order(times: Sequence[Any]) -> None:
    if any(t is None for t in times):
        return
    try:
        decreasing = any(b < a for a, b in zip(times, times[1:]))
    except TypeError as e:
        raise InvalidInputError("Candle times are not mutually comparable") from e
    if decreasing:
        raise InvalidInputError("Candle times must be non-decreasing")
