# tests/core/test_detector.py
"""
Full structure bundle assembly.
"""
from smcsignal.config import AnalysisConfig
from smcsignal.core.detector import detect_structure, empty_structure
from smcsignal.metrics.candles import to_candle_arrays
from smcsignal.models import Bias, ImbalanceKind, StructureBundle, StructureType


def test_flat_candles_have_no_structure(flat_candles):
    smc = detect_structure(to_candle_arrays(flat_candles, 50), AnalysisConfig())

    assert smc.swings.all == ()
    assert smc.bos == ()
    assert smc.choch == ()
    assert smc.order_blocks.all == ()
    assert smc.fvgs.all == ()
    assert smc.liquidity.all == ()
    assert smc.structure.type is StructureType.RANGING
    assert smc.market_bias is Bias.NEUTRAL
    assert smc.summary.total_candles == 60


def test_gap_appears_in_bundle(gap_candles):
    smc = detect_structure(to_candle_arrays(gap_candles, 50), AnalysisConfig())

    zones = [z for z in smc.fvgs.all if (z.low, z.high) == (100.0, 105.0)]
    assert len(zones) == 1
    assert zones[0].kind is ImbalanceKind.BULLISH_FVG
    assert zones[0] in smc.fvgs.active
    assert zones[0] in smc.fvgs.bullish


def test_zone_views_are_consistent(random_walk_candles):
    smc = detect_structure(to_candle_arrays(random_walk_candles, 50), AnalysisConfig())

    obs = smc.order_blocks
    assert set(obs.active) == {b for b in obs.all if not b.mitigated}
    assert len(obs.bullish) + len(obs.bearish) == len(obs.all)

    fvgs = smc.fvgs
    assert all(not z.filled and z.fill_percent < 60 for z in fvgs.active)
    assert len(fvgs.bullish) + len(fvgs.bearish) == len(fvgs.all)

    liq = smc.liquidity
    assert len(liq.bsl) + len(liq.ssl) == len(liq.all)


def test_summary_counts(random_walk_candles):
    smc = detect_structure(to_candle_arrays(random_walk_candles, 50), AnalysisConfig())
    summary = smc.summary

    assert summary.total_bos == len(smc.bos)
    assert summary.total_choch == len(smc.choch)
    assert summary.active_order_blocks == len(smc.order_blocks.active)
    assert summary.active_fvgs == len(smc.fvgs.active)
    assert summary.liquidity_zones == len(smc.liquidity.all)
    assert summary.total_candles == 300


def test_swing_lookback_from_config(random_walk_candles):
    candles = to_candle_arrays(random_walk_candles, 50)
    narrow = detect_structure(candles, AnalysisConfig(swing_lookback=1))
    wide = detect_structure(candles, AnalysisConfig(swing_lookback=5))
    assert len(narrow.swings.all) > len(wide.swings.all)


def test_empty_structure():
    smc = empty_structure()
    assert smc == StructureBundle()
    assert smc.market_bias is Bias.NEUTRAL
    assert smc.summary.total_candles == 0
