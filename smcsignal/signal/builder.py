# smcsignal/signal/builder.py
"""
Turn a confluence score into a concrete signal with stop and target levels.
"""
from smcsignal.metrics.types import round_price
from smcsignal.models import (
    ConfluenceScore, Direction, IndicatorSet, Signal, StructureBundle,
)

BASE_STOP_ATR = 1.2
ZONE_BUFFER_ATR = 0.2
MIN_RR = 2.0
TARGET_MULTIPLES = (MIN_RR, MIN_RR + 0.5, MIN_RR + 1.0)

SETUP_LABELS = {
    'smc_entry_zone': 'SMC Confluence',
    'choch': 'CHoCH Reversal',
    'order_block': 'Order Block',
    'fvg': 'FVG Fill',
    'bos': 'BOS Continuation',
    'technical_indicators': 'Technical Setup',
    'trend_alignment': 'Trend Alignment',
}


def empty_signal() -> Signal:
    return Signal()


def signal_reason(
        indicators: IndicatorSet,
        smc: StructureBundle,
        confluence: ConfluenceScore
) -> str:
    """Narrative for the dominant evidence, by fixed priority."""
    scores = confluence.scores
    side = 'Bullish' if confluence.direction is Direction.BUY else 'Bearish'

    if scores.smc_entry_zone > 15:
        return f"{smc.market_bias.value} SMC Setup | Active OB/FVG"
    if scores.choch > 10:
        return f"{side} CHoCH Reversal"
    if scores.order_block > 10:
        return f"{side} Order Block Entry"
    if scores.fvg > 8:
        return "FVG Fill Opportunity"

    tone = 'Bullish' if scores.technical_indicators > 0 else 'Bearish'
    return f"{indicators.trend.direction.value} Trend | {tone} Indicators"


def identify_setup(confluence: ConfluenceScore) -> str:
    """Label of the factor with the largest absolute contribution."""
    name, _ = max(confluence.scores.items(), key=lambda item: abs(item[1]))
    return SETUP_LABELS.get(name, 'Price Action')


def _stop_distance(
        indicators: IndicatorSet,
        smc: StructureBundle,
        direction: Direction
) -> float:
    price, atr = indicators.current_price, indicators.atr
    distance = atr * BASE_STOP_ATR

    # widen the stop past the nearest protecting order block
    if direction is Direction.BUY:
        block = next((b for b in smc.order_blocks.active if b.is_bullish), None)
        if block is not None and block.low < price:
            distance = max(distance, price - block.low + atr * ZONE_BUFFER_ATR)
    else:
        block = next((b for b in smc.order_blocks.active if not b.is_bullish), None)
        if block is not None and block.high > price:
            distance = max(distance, block.high - price + atr * ZONE_BUFFER_ATR)
    return distance


def build_signal(
        indicators: IndicatorSet,
        smc: StructureBundle,
        confluence: ConfluenceScore
) -> Signal:
    """
    Build the trade signal for the confluence direction.

    Parameters
    ----------
    indicators : IndicatorSet
        Supplies price (entry) and ATR.
    smc : StructureBundle
        Active order blocks may widen the stop.
    confluence : ConfluenceScore

    Returns
    -------
    Signal
        WAIT: all levels 0.0 and ``rr == '0.00'``.
        BUY: stop below entry, ``tp1 < tp2 < tp3`` above it. SELL mirrors.

    Notes
    -----
    - Stop distance is 1.2×ATR, or the distance to the far edge of the
      nearest same-side active order block plus 0.2×ATR when larger.
    - Targets sit at 2, 2.5 and 3 stop distances.
    - A stop distance that is not positive at 8 dp (zero ATR, no zone)
      yields WAIT.
    """
    reason = signal_reason(indicators, smc, confluence)
    setup = identify_setup(confluence)
    direction = confluence.direction
    wait = Signal(
        direction=Direction.WAIT,
        confidence=confluence.confidence,
        reason=reason,
        setup=setup,
    )

    if direction is Direction.WAIT:
        return wait

    price = indicators.current_price
    distance = _stop_distance(indicators, smc, direction)
    if not distance > 0:
        return wait

    sign = 1.0 if direction is Direction.BUY else -1.0
    entry = round_price(price)
    stop_loss = round_price(price - sign * distance)
    tp1, tp2, tp3 = (round_price(price + sign * distance * m) for m in TARGET_MULTIPLES)

    risk = abs(entry - stop_loss)
    if risk == 0:
        return wait
    rr = f"{abs(tp2 - entry) / risk:.2f}"

    return Signal(
        direction=direction,
        confidence=confluence.confidence,
        entry=entry,
        stop_loss=stop_loss,
        tp1=tp1,
        tp2=tp2,
        tp3=tp3,
        rr=rr,
        reason=reason,
        setup=setup,
    )
