# tests/test_cache.py
"""
Bounded LRU memoization of analysis results.
"""
import pytest

import smcsignal.cache as cache_module
import smcsignal.engine as engine
from smcsignal import AnalysisCache, AnalysisConfig, InvalidInputError, analyze
from smcsignal.cache import analysis_key
from smcsignal.metrics.candles import to_candle_arrays


def test_hit_returns_same_result(uptrend_candles):
    cache = AnalysisCache(maxsize=4)
    first = cache.analyze(uptrend_candles)
    second = cache.analyze(uptrend_candles)

    assert second is first
    assert (cache.hits, cache.misses) == (1, 1)
    assert first == analyze(uptrend_candles)


def test_key_depends_on_inputs(uptrend_candles, flat_candles):
    up = to_candle_arrays(uptrend_candles, 50)
    flat = to_candle_arrays(flat_candles, 50)
    config = AnalysisConfig()
    base = analysis_key('BTC', '1h', up, config)

    assert base == analysis_key('BTC', '1h', up, config)
    assert base != analysis_key('ETH', '1h', up, config)
    assert base != analysis_key('BTC', '4h', up, config)
    assert base != analysis_key('BTC', '1h', flat, config)
    assert base != analysis_key('BTC', '1h', up, AnalysisConfig(rsi_period=7))


def test_lru_eviction(uptrend_candles, flat_candles, monkeypatch):
    calls = []

    def counting_pipeline(arrays, config, metadata):
        calls.append(metadata.get('symbol'))
        return engine._analyze_arrays(arrays, config, metadata)

    monkeypatch.setattr(cache_module, '_analyze_arrays', counting_pipeline)
    cache = AnalysisCache(maxsize=2)

    cache.analyze(uptrend_candles, metadata={'symbol': 'A'})
    cache.analyze(flat_candles, metadata={'symbol': 'B'})
    cache.analyze(uptrend_candles, metadata={'symbol': 'A'})   # A most recent
    cache.analyze(uptrend_candles, metadata={'symbol': 'C'})   # evicts B
    assert len(cache) == 2

    cache.analyze(uptrend_candles, metadata={'symbol': 'A'})
    cache.analyze(flat_candles, metadata={'symbol': 'B'})
    assert calls == ['A', 'B', 'C', 'B']


def test_invalid_input_not_cached(flat_candles):
    cache = AnalysisCache()
    with pytest.raises(InvalidInputError):
        cache.analyze(flat_candles[:10])
    assert len(cache) == 0


def test_clear(uptrend_candles):
    cache = AnalysisCache()
    cache.analyze(uptrend_candles)
    cache.clear()
    assert len(cache) == 0
    assert cache.hits == cache.misses == 0


def test_invalid_maxsize():
    with pytest.raises(ValueError):
        AnalysisCache(maxsize=0)


def test_miss_validates_candles_once(uptrend_candles, monkeypatch):
    calls = []

    def counting_validation(candles, min_candles):
        calls.append(len(candles))
        return to_candle_arrays(candles, min_candles)

    monkeypatch.setattr(cache_module, 'to_candle_arrays', counting_validation)
    monkeypatch.setattr(engine, 'to_candle_arrays', counting_validation)

    result = AnalysisCache().analyze(uptrend_candles)
    assert calls == [100]
    assert result == analyze(uptrend_candles)
