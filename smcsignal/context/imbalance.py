# smcsignal/context/imbalance.py
"""
Fair value gap (imbalance zone) detection with fill tracking.
"""
from dataclasses import replace
from typing import List, Sequence, Tuple
import numpy as np
from smcsignal.metrics.candles import CandleArrays
from smcsignal.metrics.range import average_range
from smcsignal.metrics.types import round_price
from smcsignal.models import ImbalanceKind, ImbalanceZone

RANGE_WINDOW = 20


def detect_imbalances(
        candles: CandleArrays,
        significance: float = 0.3
) -> Tuple[ImbalanceZone, ...]:
    """
    Detect three-candle gaps larger than ``significance`` × the 20-bar mean range.

    Parameters
    ----------
    candles : CandleArrays
        Validated candles.
    significance : float
        Minimum gap as a fraction of the trailing 20-bar mean range.

    Returns
    -------
    tuple of ImbalanceZone ordered by index (the middle candle), unfilled.

    Notes
    -----
    - Bullish: c3.low > c1.high, zone ``[c1.high, c3.low]``.
    - Bearish: c3.high < c1.low, zone ``[c3.high, c1.low]``.
    """
    if len(candles) < 3:
        return ()

    threshold = average_range(candles.ranges, RANGE_WINDOW) * significance
    high, low = candles.high, candles.low

    bull_gap = low[2:] - high[:-2]
    bear_gap = low[:-2] - high[2:]
    bullish = (bull_gap > 0) & (bull_gap > threshold)
    bearish = (bear_gap > 0) & (bear_gap > threshold)

    zones: List[ImbalanceZone] = []
    for k in np.flatnonzero(bullish | bearish):
        mid = int(k) + 1
        if bullish[k]:
            top, bottom = float(low[k + 2]), float(high[k])
            kind, description = ImbalanceKind.BULLISH_FVG, 'Bullish FVG'
        else:
            top, bottom = float(low[k]), float(high[k + 2])
            kind, description = ImbalanceKind.BEARISH_FVG, 'Bearish FVG'
        zones.append(ImbalanceZone(
            kind=kind,
            high=round_price(top),
            low=round_price(bottom),
            midpoint=round_price((top + bottom) / 2),
            size=round_price(top - bottom),
            index=mid,
            time=candles.times[mid],
            description=description,
        ))
    return tuple(zones)


def _fill_state(candles: CandleArrays, zone: ImbalanceZone) -> Tuple[bool, float]:
    start = zone.index + 2
    if start >= len(candles) or zone.size <= 0:
        return zone.filled, zone.fill_percent

    # only candles reaching the midpoint register; the deepest of them wins
    if zone.is_bullish:
        deepest = float(np.min(candles.low[start:]))
        if deepest > zone.midpoint:
            return zone.filled, zone.fill_percent
        intrusion = zone.high - deepest
        filled = deepest <= zone.low
    else:
        deepest = float(np.max(candles.high[start:]))
        if deepest < zone.midpoint:
            return zone.filled, zone.fill_percent
        intrusion = deepest - zone.low
        filled = deepest >= zone.high

    if filled:
        return True, 100.0
    percent = min(100.0, intrusion / zone.size * 100.0)
    return False, round_price(max(zone.fill_percent, percent))


def annotate_fills(
        candles: CandleArrays,
        zones: Sequence[ImbalanceZone]
) -> Tuple[ImbalanceZone, ...]:
    """
    Return zones with ``filled`` / ``fill_percent`` set from later candles.

    Only candles after the third gap candle that reach the zone's midpoint
    count. Fill percent is the deepest such intrusion relative to the gap
    size and stays 0 until the midpoint is touched. Reaching the far edge
    marks the zone filled.
    """
    annotated = []
    for zone in zones:
        filled, percent = _fill_state(candles, zone)
        annotated.append(replace(zone, filled=filled, fill_percent=percent))
    return tuple(annotated)
