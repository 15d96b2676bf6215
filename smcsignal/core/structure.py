# core/structure.py
"""
Market structure labeling (HH, HL, LH, LL) and overall market bias.
"""
from typing import Sequence
from smcsignal.models import (
    Bias, MarketStructure, ReversalEvent, StructuralBreak, StructureType, SwingSet,
)


def infer_market_structure(swings: SwingSet) -> MarketStructure:
    """
    Label structure from the two most recent swing highs and swing lows.

    Returns
    -------
    MarketStructure
        BULLISH (HH/HL) when both the high and the low rose, BEARISH (LH/LL)
        when both fell, RANGING otherwise or with fewer than two of either.
    """
    if len(swings.highs) < 2 or len(swings.lows) < 2:
        return MarketStructure()

    prev_high, last_high = swings.highs[-2].price, swings.highs[-1].price
    prev_low, last_low = swings.lows[-2].price, swings.lows[-1].price

    hh = last_high > prev_high
    hl = last_low > prev_low
    lh = last_high < prev_high
    ll = last_low < prev_low

    if hh and hl:
        kind = StructureType.BULLISH
    elif lh and ll:
        kind = StructureType.BEARISH
    else:
        kind = StructureType.RANGING

    return MarketStructure(type=kind, hh=hh, hl=hl, lh=lh, ll=ll)


def determine_market_bias(
    structure: MarketStructure,
    bos: Sequence[StructuralBreak],
    choch: Sequence[ReversalEvent],
    total_candles: int,
    lookback: int = 20
) -> Bias:
    """
    Overall directional bias.

    Parameters
    ----------
    structure : MarketStructure
        Base bias (HH/HL → BULLISH, LH/LL → BEARISH, else NEUTRAL).
    bos, choch : sequences, most recent first
    total_candles : int
        Length of the analysed sequence.
    lookback : int
        A CHoCH overrides only if it sits within this many candles of the end.

    Notes
    -----
    - Precedence: recent CHoCH > majority BOS direction > structure.
    - A tied BOS count leaves the structure-derived bias in place.
    """
    if choch and total_candles - 1 - choch[0].index <= lookback:
        return Bias.BULLISH if choch[0].is_bullish else Bias.BEARISH

    bullish = sum(1 for b in bos if b.is_bullish)
    bearish = len(bos) - bullish
    if bullish > bearish:
        return Bias.BULLISH
    if bearish > bullish:
        return Bias.BEARISH

    if structure.type is StructureType.BULLISH:
        return Bias.BULLISH
    if structure.type is StructureType.BEARISH:
        return Bias.BEARISH
    return Bias.NEUTRAL
