# tests/test_config.py
import pytest
from smcsignal.config import AnalysisConfig


def test_defaults():
    config = AnalysisConfig()
    assert config.ema_periods == (20, 50, 200)
    assert (config.macd_fast, config.macd_slow, config.macd_signal) == (12, 26, 9)
    assert config.min_candles_required == 50
    assert config.fvg_significance == 0.3
    assert config.assumed_win_rate == 0.60
    assert config.choch_age_decay is False


def test_from_dict_camel_case():
    config = AnalysisConfig.from_dict({
        'emaPeriods': [10, 30, 100],
        'rsiPeriod': 7,
        'macdPeriods': {'fast': 8, 'slow': 21, 'signal': 5},
        'minCandlesRequired': 80,
        'fvgSignificance': 0.5,
        'liquidityTolerance': 0.002,
        'accountSize': 25000,
        'chochAgeDecay': True,
    })
    assert config.ema_periods == (10, 30, 100)
    assert config.rsi_period == 7
    assert (config.macd_fast, config.macd_slow, config.macd_signal) == (8, 21, 5)
    assert config.min_candles_required == 80
    assert config.fvg_significance == 0.5
    assert config.liquidity_tolerance == 0.002
    assert config.account_size == 25000
    assert config.choch_age_decay is True


def test_from_dict_partial_macd_keeps_defaults():
    config = AnalysisConfig.from_dict({'macdPeriods': {'signal': 4}})
    assert (config.macd_fast, config.macd_slow, config.macd_signal) == (12, 26, 4)


def test_from_dict_accepts_field_names():
    assert AnalysisConfig.from_dict({'swing_lookback': 5}).swing_lookback == 5


def test_from_dict_unknown_option():
    with pytest.raises(ValueError, match="Unknown configuration option"):
        AnalysisConfig.from_dict({'emaPeriod': [1, 2, 3]})


def test_from_dict_unknown_macd_key():
    with pytest.raises(ValueError, match="macdPeriods"):
        AnalysisConfig.from_dict({'macdPeriods': {'fast': 5, 'slower': 20}})


@pytest.mark.parametrize("value", [12, [12, 26, 9], 'fast'])
def test_from_dict_macd_not_a_mapping(value):
    with pytest.raises(ValueError, match="macdPeriods must be a mapping"):
        AnalysisConfig.from_dict({'macdPeriods': value})


@pytest.mark.parametrize("kwargs, message", [
    (dict(ema_periods=(20, 50)), "exactly three"),
    (dict(ema_periods=(0, 50, 200)), "ema_periods"),
    (dict(rsi_period=0), "rsi_period"),
    (dict(macd_fast=26, macd_slow=26), "macd_fast must be < macd_slow"),
    (dict(min_candles_required=5), "min_candles_required"),
    (dict(fvg_significance=-0.1), "fvg_significance"),
    (dict(liquidity_tolerance=0.0), "liquidity_tolerance"),
    (dict(account_size=0.0), "account_size"),
    (dict(risk_percent=0.0), "risk_percent"),
    (dict(risk_percent=150.0), "risk_percent"),
    (dict(assumed_win_rate=1.2), "assumed_win_rate"),
])
def test_invalid_values(kwargs, message):
    with pytest.raises(ValueError, match=message):
        AnalysisConfig(**kwargs)


def test_config_is_frozen():
    config = AnalysisConfig()
    with pytest.raises(AttributeError):
        config.rsi_period = 3
