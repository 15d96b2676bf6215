# smcsignal/signal/confluence.py
"""
Seven-factor confluence score combining indicator and structure evidence.

Factor ranges:
    smc_entry_zone        0 .. 25
    choch                 0 .. 20
    order_block           0 .. 20
    fvg                   0 .. 15
    bos                 -10 .. +10
    technical_indicators -15 .. +15
    trend_alignment      -8 .. +8
"""
from smcsignal.config import AnalysisConfig
from smcsignal.metrics.types import round_price
from smcsignal.models import (
    Bias, ConfluenceScore, Direction, FactorScores, IndicatorSet, ScoreContribution,
    Strength, StructureBundle,
)

DIRECTION_THRESHOLD = 5.0
MIN_CONFIDENCE = 30.0
MAX_CONFIDENCE = 95.0

CHOCH_MAX_AGE = 20
CHOCH_DECAY_PER_CANDLE = 0.25


def empty_confluence() -> ConfluenceScore:
    """All factors zero, WAIT at minimum confidence."""
    return ConfluenceScore()


def _distance(price: float, level: float) -> float:
    return abs(price - level) / price


# ==============================================================================
# SECTION: Factors
# ==============================================================================

def score_entry_zone(smc: StructureBundle, price: float) -> float:
    """
    Price sitting inside an SMC entry zone.

    Up to 15 for the first active order block within 1%, up to 10 for the
    first active FVG within 0.8% (and < 60% filled), +5 when the market bias
    has an order block on its side. Capped at 25.
    """
    if not smc.order_blocks.active and not smc.fvgs.active:
        return 0.0

    score = 0.0
    for block in smc.order_blocks.active:
        distance = _distance(price, block.midpoint)
        if distance < 0.01:
            score += max(10.0, 15.0 - distance * 1500)
            break

    for zone in smc.fvgs.active:
        distance = _distance(price, zone.midpoint)
        if distance < 0.008 and zone.fill_percent < 60:
            score += max(5.0, 10.0 - distance * 1250)
            break

    if smc.market_bias is Bias.BULLISH and smc.order_blocks.bullish:
        score += 5.0
    if smc.market_bias is Bias.BEARISH and smc.order_blocks.bearish:
        score += 5.0

    return min(25.0, score)


def score_choch(smc: StructureBundle, total_candles: int, age_decay: bool = False) -> float:
    """
    15 for a recent CHoCH, +5 when STRONG.

    With ``age_decay`` the score drops 0.25 per candle since the event and is
    0 past 20 candles; without it every CHoCH counts as fresh.
    """
    if not smc.choch:
        return 0.0

    latest = smc.choch[0]
    age = max(0, total_candles - 1 - latest.index) if age_decay else 0
    if age > CHOCH_MAX_AGE:
        return 0.0

    score = 15.0
    if latest.strength is Strength.STRONG:
        score += 5.0
    score -= age * CHOCH_DECAY_PER_CANDLE
    return min(20.0, max(0.0, score))


def score_order_block(smc: StructureBundle, price: float) -> float:
    """Best active order block within 1.5%, 10..20 scaled by distance."""
    best = 0.0
    for block in smc.order_blocks.active:
        distance = _distance(price, block.midpoint)
        if distance < 0.015:
            best = max(best, max(10.0, 20.0 - distance * 1333))
    return min(20.0, best)


def score_fvg(smc: StructureBundle, price: float) -> float:
    """Best active FVG within 1%, 5..15 less a fill-percent penalty."""
    best = 0.0
    for zone in smc.fvgs.active:
        distance = _distance(price, zone.midpoint)
        if distance < 0.01 and zone.fill_percent < 60:
            score = max(5.0, 15.0 - distance * 1500 - zone.fill_percent * 0.08)
            best = max(best, score)
    return min(15.0, best)


def score_bos(smc: StructureBundle) -> float:
    if not smc.bos:
        return 0.0
    return 10.0 if smc.bos[0].is_bullish else -10.0


def score_technicals(indicators: IndicatorSet) -> float:
    """EMA stack ±8, RSI extremes ±5, MACD ±4, STRONG trend +3; clamped to ±15."""
    score = 0.0

    if indicators.ema20 > indicators.ema50 > indicators.ema200:
        score += 8
    elif indicators.ema20 < indicators.ema50 < indicators.ema200:
        score -= 8

    if indicators.rsi < 30:
        score += 5
    if indicators.rsi > 70:
        score -= 5

    if indicators.macd.trending is Bias.BULLISH:
        score += 4
    elif indicators.macd.trending is Bias.BEARISH:
        score -= 4

    if indicators.trend.strength is Strength.STRONG:
        score += 3

    return min(15.0, max(-15.0, score))


def score_trend_alignment(smc: StructureBundle, indicators: IndicatorSet) -> float:
    direction = indicators.trend.direction
    if smc.market_bias is Bias.BULLISH and direction is Bias.BULLISH:
        return 8.0
    if smc.market_bias is Bias.BEARISH and direction is Bias.BEARISH:
        return -8.0
    return 0.0


# ==============================================================================
# SECTION: Aggregate
# ==============================================================================

def _label(factor: str) -> str:
    return factor.replace('_', ' ').upper()


def build_breakdown(scores: FactorScores):
    """Factors by absolute contribution, descending (declaration order on ties)."""
    ranked = sorted(scores.items(), key=lambda item: abs(item[1]), reverse=True)
    return tuple(
        ScoreContribution(factor=_label(name), contribution=round(value, 2))
        for name, value in ranked
    )


def score_confluence(
        indicators: IndicatorSet,
        smc: StructureBundle,
        config: AnalysisConfig = AnalysisConfig(),
        total_candles: int = 0
) -> ConfluenceScore:
    """
    Sum the seven factors into a directional score.

    Parameters
    ----------
    indicators : IndicatorSet
    smc : StructureBundle
    config : AnalysisConfig
        ``choch_age_decay`` switches CHoCH ageing on.
    total_candles : int
        Sequence length, used only for CHoCH age.

    Returns
    -------
    ConfluenceScore
        ``total_score`` rounded to 2 dp; BUY above +5, SELL below -5, else
        WAIT; confidence ``clamp(50 + 2·|total|, 30, 95)``.
    """
    price = indicators.current_price
    if price <= 0:
        return empty_confluence()

    scores = FactorScores(
        smc_entry_zone=round_price(score_entry_zone(smc, price)),
        choch=round_price(score_choch(smc, total_candles, config.choch_age_decay)),
        order_block=round_price(score_order_block(smc, price)),
        fvg=round_price(score_fvg(smc, price)),
        bos=score_bos(smc),
        technical_indicators=score_technicals(indicators),
        trend_alignment=score_trend_alignment(smc, indicators),
    )

    total = round(sum(value for _, value in scores.items()), 2)
    if total > DIRECTION_THRESHOLD:
        direction = Direction.BUY
    elif total < -DIRECTION_THRESHOLD:
        direction = Direction.SELL
    else:
        direction = Direction.WAIT

    confidence = min(MAX_CONFIDENCE, max(MIN_CONFIDENCE, 50 + abs(total) * 2))

    return ConfluenceScore(
        scores=scores,
        total_score=total,
        direction=direction,
        confidence=round(confidence, 2),
        breakdown=build_breakdown(scores),
    )
