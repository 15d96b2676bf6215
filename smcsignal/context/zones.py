# smcsignal/context/zones.py
"""
Order block (supply/demand zone) detection with mitigation tracking.

Detection and mitigation are separate passes: ``detect_order_blocks`` emits
unmitigated zones, ``annotate_mitigation`` returns new records flagged from
the candles that follow each zone.
"""
from dataclasses import replace
from typing import List, Sequence, Tuple
import numpy as np
from smcsignal.metrics.candles import CandleArrays
from smcsignal.metrics.types import round_price
from smcsignal.models import OrderBlock, OrderBlockKind, StructuralBreak

MAX_BLOCKS_PER_BREAK = 2


# ==============================================================================
# SECTION: Candidate Scoring
# ==============================================================================

def _score_candidates(
        candles: CandleArrays,
        event: StructuralBreak,
        lookback: int
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Score opposite-coloured candles preceding a break.

    Parameters
    ----------
    candles : CandleArrays
        Validated candles.
    event : StructuralBreak
        The break whose origin is searched.
    lookback : int
        Maximum bars scanned backwards from the break.

    Returns
    -------
    Tuple[np.ndarray, np.ndarray]
        - candidate indices, nearest-to-break first
        - displacement score per candidate (move after break / candle range)
    """
    depth = min(event.index, lookback)
    idx = np.arange(event.index - 1, event.index - depth - 1, -1)
    if len(idx) == 0:
        return idx, np.array([], dtype=np.float64)

    open_, close = candles.open[idx], candles.close[idx]
    high, low = candles.high[idx], candles.low[idx]

    if event.is_bullish:
        opposite = close < open_
        move = np.maximum(0.0, event.level - low)
    else:
        opposite = close > open_
        move = np.maximum(0.0, high - event.level)

    rng = high - low
    score = np.divide(move, rng, out=np.zeros_like(move), where=rng > 0)
    return idx[opposite], score[opposite]


def detect_order_blocks(
        candles: CandleArrays,
        bos: Sequence[StructuralBreak],
        lookback: int = 20
) -> Tuple[OrderBlock, ...]:
    """
    Find the origin candles of each break of structure.

    For a bullish BOS the candidates are bearish candles in the ``lookback``
    bars before it (bullish candles for a bearish BOS). The two with the
    highest displacement score are kept per break.

    Returns
    -------
    tuple of OrderBlock in break order, all with ``mitigated=False``.
    """
    blocks: List[OrderBlock] = []
    for event in bos:
        idx, score = _score_candidates(candles, event, lookback)
        if len(idx) == 0:
            continue
        best = np.argsort(-score, kind='stable')[:MAX_BLOCKS_PER_BREAK]
        kind = OrderBlockKind.BULLISH_OB if event.is_bullish else OrderBlockKind.BEARISH_OB
        label = 'Bullish' if event.is_bullish else 'Bearish'
        for b in best:
            i = int(idx[b])
            high, low = float(candles.high[i]), float(candles.low[i])
            blocks.append(OrderBlock(
                kind=kind,
                high=round_price(high),
                low=round_price(low),
                midpoint=round_price((high + low) / 2),
                index=i,
                time=candles.times[i],
                strength=round_price(min(100.0, score[b] * 50)),
                description=f"{label} OB",
            ))
    return tuple(blocks)


# ==============================================================================
# SECTION: Mitigation
# ==============================================================================

def _is_mitigated(candles: CandleArrays, block: OrderBlock) -> bool:
    start = block.index + 1
    if block.is_bullish:
        probe = candles.low[start:]
    else:
        probe = candles.high[start:]
    return bool(np.any((probe >= block.low) & (probe <= block.high)))


def annotate_mitigation(
        candles: CandleArrays,
        blocks: Sequence[OrderBlock]
) -> Tuple[OrderBlock, ...]:
    """
    Flag zones that price later re-entered.

    A bullish block is mitigated once a later low lands inside ``[low, high]``;
    a bearish block once a later high does.
    """
    return tuple(
        replace(block, mitigated=True) if _is_mitigated(candles, block) else block
        for block in blocks
    )
