# smcsignal/cache.py
"""
Explicit, bounded memoization of ``analyze`` results.

The engine itself holds no state; callers that re-analyse identical inputs
opt in by routing calls through an ``AnalysisCache``.
"""
import hashlib
import logging
from collections import OrderedDict
from typing import Any, Mapping, Optional

from smcsignal.config import AnalysisConfig
from smcsignal.engine import DEFAULT_SYMBOL, DEFAULT_TIMEFRAME, _analyze_arrays
from smcsignal.metrics.candles import CandleArrays, CandleInput, to_candle_arrays
from smcsignal.models import AnalysisResult

logger = logging.getLogger(__name__)


def analysis_key(
        symbol: str,
        timeframe: str,
        candles: CandleArrays,
        config: AnalysisConfig
) -> str:
    """SHA-256 over symbol, timeframe, every candle column and the config."""
    digest = hashlib.sha256()
    digest.update(f"{symbol}|{timeframe}|".encode())
    for column in (candles.open, candles.high, candles.low, candles.close, candles.volume):
        digest.update(column.tobytes())
    digest.update(repr(candles.times).encode())
    digest.update(repr(config).encode())
    return digest.hexdigest()


class AnalysisCache:
    """
    Least-recently-used cache of analysis results.

    Parameters
    ----------
    maxsize : int
        Entries kept; the least recently used entry is evicted beyond it.
    """

    def __init__(self, maxsize: int = 128):
        if maxsize < 1:
            raise ValueError("maxsize must be ≥ 1")
        self.maxsize = maxsize
        self._entries: "OrderedDict[str, AnalysisResult]" = OrderedDict()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def get(self, key: str) -> Optional[AnalysisResult]:
        result = self._entries.get(key)
        if result is not None:
            self._entries.move_to_end(key)
        return result

    def put(self, key: str, result: AnalysisResult) -> None:
        self._entries[key] = result
        self._entries.move_to_end(key)
        while len(self._entries) > self.maxsize:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug("evicted analysis %s", evicted[:12])

    def clear(self) -> None:
        self._entries.clear()
        self.hits = 0
        self.misses = 0

    def analyze(
            self,
            candles: CandleInput,
            config: Optional[AnalysisConfig] = None,
            metadata: Optional[Mapping[str, Any]] = None
    ) -> AnalysisResult:
        """
        ``engine.analyze`` with memoization on (symbol, timeframe, candles, config).

        Candles are validated once; the same arrays feed the key and, on a
        miss, the pipeline.

        Raises
        ------
        InvalidInputError
            As ``engine.analyze``; invalid input is never cached.
        """
        config = config or AnalysisConfig()
        metadata = metadata or {}
        arrays = to_candle_arrays(candles, config.min_candles_required)
        key = analysis_key(
            metadata.get('symbol') or DEFAULT_SYMBOL,
            metadata.get('timeframe') or DEFAULT_TIMEFRAME,
            arrays,
            config,
        )

        cached = self.get(key)
        if cached is not None:
            self.hits += 1
            return cached

        self.misses += 1
        result = _analyze_arrays(arrays, config, metadata)
        self.put(key, result)
        return result
