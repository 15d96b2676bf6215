# core/breaks.py
"""
Break of Structure (BOS) and Change of Character (CHoCH) events from swing points.
"""
from typing import List, Sequence, Tuple
import numpy as np
from smcsignal.metrics.candles import CandleArrays
from smcsignal.metrics.types import round_price
from smcsignal.models import (
    BreakKind, ReversalEvent, ReversalKind, Strength, StructuralBreak, SwingKind,
    SwingPoint, SwingSet,
)

STRENGTH_WINDOW = 5


def _first_close_through(
    close: np.ndarray,
    start: int,
    stop: int,
    level: float,
    above: bool
) -> int:
    """Index of the first close in ``(start, stop)`` beyond ``level``, or -1."""
    window = close[start + 1:stop]
    hits = np.flatnonzero(window > level if above else window < level)
    return int(hits[0]) + start + 1 if len(hits) else -1


def detect_bos(candles: CandleArrays, swings: SwingSet) -> Tuple[StructuralBreak, ...]:
    """
    Detect breaks of structure between consecutive same-side swings.

    Parameters
    ----------
    candles : CandleArrays
        Validated candles.
    swings : SwingSet
        From `detect_swings`.

    Returns
    -------
    tuple of StructuralBreak, most recent first.

    Notes
    -----
    - For each consecutive pair of swing highs, the first close strictly
      between them that exceeds the earlier high is a BULLISH_BOS at that
      candle. Mirror rule on swing lows for BEARISH_BOS.
    - `distance` is 0 when the last close already trades beyond the level,
      otherwise the gap back to it.
    """
    close = candles.close
    current = candles.current_price
    events: List[StructuralBreak] = []

    for prev, cur in zip(swings.highs, swings.highs[1:]):
        j = _first_close_through(close, prev.index, cur.index, prev.price, above=True)
        if j >= 0:
            events.append(StructuralBreak(
                kind=BreakKind.BULLISH_BOS,
                level=prev.price,
                index=j,
                time=candles.times[j],
                distance=0.0 if current > prev.price else round_price(prev.price - current),
                description=f"Bullish BOS above {prev.price:.4f}",
            ))

    for prev, cur in zip(swings.lows, swings.lows[1:]):
        j = _first_close_through(close, prev.index, cur.index, prev.price, above=False)
        if j >= 0:
            events.append(StructuralBreak(
                kind=BreakKind.BEARISH_BOS,
                level=prev.price,
                index=j,
                time=candles.times[j],
                distance=0.0 if current < prev.price else round_price(current - prev.price),
                description=f"Bearish BOS below {prev.price:.4f}",
            ))

    # stable: at equal index bullish events keep precedence
    return tuple(sorted(events, key=lambda e: e.index, reverse=True))


def reversal_strength(candles: CandleArrays, index: int) -> Strength:
    """
    Compare the trigger bar's range with the mean range of the 5 bars before it.

    > 1.5× → STRONG, > 1× → MODERATE, else WEAK; UNKNOWN with < 5 prior bars.
    """
    if index < STRENGTH_WINDOW or len(candles) < STRENGTH_WINDOW + 1:
        return Strength.UNKNOWN
    avg_range = float(np.mean(candles.ranges[index - STRENGTH_WINDOW:index]))
    trigger_range = float(candles.ranges[index])
    if trigger_range > avg_range * 1.5:
        return Strength.STRONG
    if trigger_range > avg_range:
        return Strength.MODERATE
    return Strength.WEAK


def _pattern(window: Sequence[SwingPoint]) -> Tuple[SwingKind, ...]:
    return tuple(s.kind for s in window)


_BULLISH_PATTERN = (SwingKind.LOW, SwingKind.HIGH, SwingKind.LOW, SwingKind.HIGH)
_BEARISH_PATTERN = (SwingKind.HIGH, SwingKind.LOW, SwingKind.HIGH, SwingKind.LOW)


def detect_choch(candles: CandleArrays, swings: SwingSet) -> Tuple[ReversalEvent, ...]:
    """
    Detect changes of character over sliding windows of four merged swings.

    Bullish: LOW, HIGH, LOW, HIGH with s3 < s1 (lower low) and s4 > s2
    (break above the intervening high). Bearish: the mirror pattern with
    s3 > s1 and s4 < s2. Level is s2, the event sits at s4.

    Returns
    -------
    tuple of ReversalEvent, most recent first.
    """
    events: List[ReversalEvent] = []
    merged = swings.all

    for k in range(3, len(merged)):
        s1, s2, s3, s4 = merged[k - 3:k + 1]
        pattern = _pattern((s1, s2, s3, s4))

        if pattern == _BULLISH_PATTERN and s3.price < s1.price and s4.price > s2.price:
            kind, description = ReversalKind.BULLISH_CHOCH, 'Bullish CHoCH - Trend reversal'
        elif pattern == _BEARISH_PATTERN and s3.price > s1.price and s4.price < s2.price:
            kind, description = ReversalKind.BEARISH_CHOCH, 'Bearish CHoCH - Trend reversal'
        else:
            continue

        events.append(ReversalEvent(
            kind=kind,
            level=s2.price,
            index=s4.index,
            time=s4.time,
            strength=reversal_strength(candles, s4.index),
            description=description,
        ))

    return tuple(sorted(events, key=lambda e: e.index, reverse=True))
