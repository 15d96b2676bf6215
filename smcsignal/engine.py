# smcsignal/engine.py
"""
Analysis pipeline: candles → indicators + structure → confluence → signal → sizing.

``analyze`` is a pure function of its arguments. Input validation runs first
and is the only failure a caller sees; every later stage falls back to its
empty value when it fails unexpectedly.
"""
import logging
from datetime import date, datetime
from typing import Any, Callable, Mapping, Optional, TypeVar

from smcsignal.config import AnalysisConfig
from smcsignal.core.detector import detect_structure, empty_structure
from smcsignal.metrics.candles import CandleArrays, CandleInput, to_candle_arrays
from smcsignal.metrics.indicators import compute_indicators
from smcsignal.models import AnalysisResult
from smcsignal.signal.builder import build_signal, empty_signal
from smcsignal.signal.confluence import empty_confluence, score_confluence
from smcsignal.signal.sizing import empty_sizing, size_position

logger = logging.getLogger(__name__)

DEFAULT_SYMBOL = 'UNKNOWN'
DEFAULT_TIMEFRAME = '1h'

T = TypeVar('T')


def _run_stage(name: str, stage: Callable[[], T], fallback: Callable[[], T]) -> T:
    try:
        return stage()
    except Exception:
        logger.exception("%s stage failed; using empty %s", name, name)
        return fallback()


def _timestamp(time: Any) -> Any:
    if isinstance(time, (datetime, date)):
        return time.isoformat()
    return time


def analyze(
        candles: CandleInput,
        config: Optional[AnalysisConfig] = None,
        metadata: Optional[Mapping[str, Any]] = None
) -> AnalysisResult:
    """
    Run the full analysis over one instrument/timeframe candle sequence.

    Parameters
    ----------
    candles : DataFrame | sequence of Candle | sequence of mappings
        Ascending by time, at least ``config.min_candles_required`` long.
    config : AnalysisConfig, optional
        Defaults to ``AnalysisConfig()``.
    metadata : mapping, optional
        ``symbol`` and ``timeframe`` echoed into the result; never used in
        computation.

    Returns
    -------
    AnalysisResult
        ``timestamp`` is the last candle's time (ISO-8601 for datetimes).

    Raises
    ------
    InvalidInputError
        Before any computation, if the candles fail validation.
    """
    config = config or AnalysisConfig()
    metadata = metadata or {}
    arrays = to_candle_arrays(candles, config.min_candles_required)
    return _analyze_arrays(arrays, config, metadata)


def _analyze_arrays(
        arrays: CandleArrays,
        config: AnalysisConfig,
        metadata: Mapping[str, Any]
) -> AnalysisResult:
    """Pipeline body over already validated candle arrays."""
    n = len(arrays)
    logger.debug("analyzing %d candles for %s", n, metadata.get('symbol', DEFAULT_SYMBOL))

    indicators = compute_indicators(arrays, config)

    smc = _run_stage(
        'structure', lambda: detect_structure(arrays, config), empty_structure
    )
    confluence = _run_stage(
        'confluence', lambda: score_confluence(indicators, smc, config, n), empty_confluence
    )
    signal = _run_stage(
        'signal', lambda: build_signal(indicators, smc, confluence), empty_signal
    )
    risk = _run_stage(
        'sizing', lambda: size_position(signal, config), empty_sizing
    )

    logger.debug(
        "score %.2f → %s (confidence %.2f, setup %s)",
        confluence.total_score, signal.direction.value, signal.confidence, signal.setup,
    )

    return AnalysisResult(
        timestamp=_timestamp(arrays.times[-1]),
        symbol=metadata.get('symbol') or DEFAULT_SYMBOL,
        timeframe=metadata.get('timeframe') or DEFAULT_TIMEFRAME,
        data_points=n,
        indicators=indicators,
        smc=smc,
        confluence=confluence,
        signal=signal,
        risk=risk,
    )
