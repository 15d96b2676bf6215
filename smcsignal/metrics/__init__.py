from .atr import compute_atr, compute_atr_series, compute_true_range
from .averages import compute_macd, compute_rsi, ema_series, ema_value
from .candles import CandleArrays, to_candle_arrays
from .indicators import compute_indicators, determine_trend
from .range import average_range, classify_volatility, support_resistance

__all__ = [
    'CandleArrays',
    'to_candle_arrays',
    'compute_true_range',
    'compute_atr',
    'compute_atr_series',
    'ema_series',
    'ema_value',
    'compute_rsi',
    'compute_macd',
    'average_range',
    'support_resistance',
    'classify_volatility',
    'compute_indicators',
    'determine_trend',
]
