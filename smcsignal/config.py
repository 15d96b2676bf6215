# smcsignal/config.py
from dataclasses import dataclass, fields
from typing import Any, Mapping, Tuple


@dataclass(frozen=True)
class AnalysisConfig:
    """Immutable configuration for one analysis call."""

    # --- INDICATORS ---
    ema_periods: Tuple[int, int, int] = (20, 50, 200)
    rsi_period: int = 14
    macd_fast: int = 12
    macd_slow: int = 26
    macd_signal: int = 9
    atr_period: int = 14
    min_candles_required: int = 50

    # --- STRUCTURE ---
    swing_lookback: int = 3
    bos_lookback: int = 20
    ob_lookback: int = 20
    fvg_significance: float = 0.3   # fraction of the 20-candle average range
    liquidity_tolerance: float = 0.001

    # --- SCORING ---
    choch_age_decay: bool = False

    # --- RISK ---
    account_size: float = 10000.0
    risk_percent: float = 2.0
    assumed_win_rate: float = 0.60  # not derived from history

    def __post_init__(self):
        """Validate configuration."""
        object.__setattr__(self, 'ema_periods', tuple(self.ema_periods))
        if len(self.ema_periods) != 3:
            raise ValueError("ema_periods must hold exactly three periods")
        if any(p < 1 for p in self.ema_periods):
            raise ValueError("ema_periods must all be ≥ 1")
        for name in ('rsi_period', 'macd_fast', 'macd_slow', 'macd_signal',
                     'atr_period', 'swing_lookback', 'bos_lookback', 'ob_lookback'):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be ≥ 1")
        if self.macd_fast >= self.macd_slow:
            raise ValueError("macd_fast must be < macd_slow")
        if self.min_candles_required < 2 * self.swing_lookback + 1:
            raise ValueError("min_candles_required must cover at least one swing window")
        if self.fvg_significance < 0:
            raise ValueError("fvg_significance must be ≥ 0")
        if self.liquidity_tolerance <= 0:
            raise ValueError("liquidity_tolerance must be > 0")
        if self.account_size <= 0:
            raise ValueError("account_size must be > 0")
        if not 0 < self.risk_percent <= 100:
            raise ValueError("risk_percent must be in (0, 100]")
        if not 0.0 <= self.assumed_win_rate <= 1.0:
            raise ValueError("assumed_win_rate must be between 0 and 1")

    @classmethod
    def from_dict(cls, options: Mapping[str, Any]) -> 'AnalysisConfig':
        """
        Build a config from camelCase option names (``emaPeriods``,
        ``macdPeriods={'fast', 'slow', 'signal'}``, ...) or field names.

        Raises
        ------
        ValueError
            On unknown option names or invalid values.
        """
        field_names = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in options.items():
            if key == 'macdPeriods':
                if not isinstance(value, Mapping):
                    raise ValueError(
                        f"macdPeriods must be a mapping of fast/slow/signal, got {value!r}"
                    )
                unknown = set(value) - {'fast', 'slow', 'signal'}
                if unknown:
                    raise ValueError(f"Unknown macdPeriods keys: {sorted(unknown)}")
                for part in ('fast', 'slow', 'signal'):
                    if part in value:
                        kwargs[f'macd_{part}'] = value[part]
                continue
            name = _snake(key)
            if name not in field_names:
                raise ValueError(f"Unknown configuration option: {key}")
            kwargs[name] = value
        return cls(**kwargs)


def _snake(name: str) -> str:
    return ''.join('_' + c.lower() if c.isupper() else c for c in name)
