# smcsignal/metrics/indicators.py
"""
Indicator Calculator: one IndicatorSet snapshot per analysis call.
"""
from smcsignal.config import AnalysisConfig
from smcsignal.models import Bias, IndicatorSet, Strength, TrendState
from .atr import compute_atr
from .averages import compute_macd, compute_rsi, ema_series, ema_value
from .candles import CandleArrays
from .range import classify_volatility, support_resistance
from .types import round_price

SR_WINDOW = 40


def determine_trend(ema_fast: float, ema_mid: float, ema_slow: float) -> TrendState:
    """
    Classify trend from the EMA stack.

    Fully ordered stack → STRONG; only the fast pair ordered → MODERATE;
    otherwise NEUTRAL / WEAK.
    """
    if ema_fast > ema_mid > ema_slow:
        return TrendState(Bias.BULLISH, Strength.STRONG)
    if ema_fast < ema_mid < ema_slow:
        return TrendState(Bias.BEARISH, Strength.STRONG)
    if ema_fast > ema_mid:
        return TrendState(Bias.BULLISH, Strength.MODERATE)
    if ema_fast < ema_mid:
        return TrendState(Bias.BEARISH, Strength.MODERATE)
    return TrendState(Bias.NEUTRAL, Strength.WEAK)


def compute_indicators(candles: CandleArrays, config: AnalysisConfig) -> IndicatorSet:
    """
    Compute every indicator from validated candle arrays.

    Parameters
    ----------
    candles : CandleArrays
        Output of ``to_candle_arrays``.
    config : AnalysisConfig
        Periods for EMA/RSI/MACD/ATR.

    Returns
    -------
    IndicatorSet
        Scalars rounded to 8 decimals; EMA series for the first two periods.
    """
    close = candles.close
    fast, mid, slow = config.ema_periods

    ema_fast = ema_value(close, fast)
    ema_mid = ema_value(close, mid)
    ema_slow = ema_value(close, slow)
    support, resistance = support_resistance(candles.high, candles.low, SR_WINDOW)

    return IndicatorSet(
        current_price=candles.current_price,
        ema20=ema_fast,
        ema50=ema_mid,
        ema200=ema_slow,
        rsi=compute_rsi(close, config.rsi_period),
        macd=compute_macd(close, config.macd_fast, config.macd_slow, config.macd_signal),
        atr=compute_atr(candles.high, candles.low, close, config.atr_period),
        support=support,
        resistance=resistance,
        ema20_series=tuple(round_price(v) for v in ema_series(close, fast)),
        ema50_series=tuple(round_price(v) for v in ema_series(close, mid)),
        trend=determine_trend(ema_fast, ema_mid, ema_slow),
        volatility_level=classify_volatility(candles.ranges),
    )
