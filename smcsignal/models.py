# smcsignal/models.py
"""
Immutable records produced by the analysis pipeline.

Every record is a frozen dataclass; collections are tuples. ``to_dict()``
renders the camelCase output contract consumed by downstream collaborators
(HTTP layer, persistence, UI).
"""
from dataclasses import dataclass, field, fields, is_dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Tuple

import numpy as np


class SwingKind(str, Enum):
    HIGH = 'HIGH'
    LOW = 'LOW'


class BreakKind(str, Enum):
    BULLISH_BOS = 'BULLISH_BOS'
    BEARISH_BOS = 'BEARISH_BOS'


class ReversalKind(str, Enum):
    BULLISH_CHOCH = 'BULLISH_CHOCH'
    BEARISH_CHOCH = 'BEARISH_CHOCH'


class OrderBlockKind(str, Enum):
    BULLISH_OB = 'BULLISH_OB'
    BEARISH_OB = 'BEARISH_OB'


class ImbalanceKind(str, Enum):
    BULLISH_FVG = 'BULLISH_FVG'
    BEARISH_FVG = 'BEARISH_FVG'


class LiquidityKind(str, Enum):
    BSL = 'BSL'  # buy-side, above swing highs
    SSL = 'SSL'  # sell-side, below swing lows


class Strength(str, Enum):
    WEAK = 'WEAK'
    MODERATE = 'MODERATE'
    STRONG = 'STRONG'
    UNKNOWN = 'UNKNOWN'


class Bias(str, Enum):
    BULLISH = 'BULLISH'
    BEARISH = 'BEARISH'
    NEUTRAL = 'NEUTRAL'


class Volatility(str, Enum):
    LOW = 'LOW'
    NORMAL = 'NORMAL'
    HIGH = 'HIGH'
    UNKNOWN = 'UNKNOWN'


class StructureType(str, Enum):
    RANGING = 'RANGING'
    BULLISH = 'BULLISH (HH/HL)'
    BEARISH = 'BEARISH (LH/LL)'


class Direction(str, Enum):
    BUY = 'BUY'
    SELL = 'SELL'
    WAIT = 'WAIT'


# ==============================================================================
# SECTION: Serialization
# ==============================================================================

_KEY_OVERRIDES = {
    'position_size_usd': 'positionSizeUSD',
    'total_bos': 'totalBOS',
    'total_choch': 'totalCHoCH',
    'active_fvgs': 'activeFVGs',
}


def _camel(name: str) -> str:
    if name in _KEY_OVERRIDES:
        return _KEY_OVERRIDES[name]
    head, *rest = name.split('_')
    return head + ''.join(part[:1].upper() + part[1:] for part in rest)


def _plain(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        return {_camel(f.name): _plain(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, np.generic):
        return value.item()
    return value


class _Record:
    def to_dict(self) -> Dict[str, Any]:
        """Plain, JSON-ready dict with camelCase keys."""
        return _plain(self)


# ==============================================================================
# SECTION: Input
# ==============================================================================

@dataclass(frozen=True)
class Candle(_Record):
    time: Any
    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0


# ==============================================================================
# SECTION: Indicators
# ==============================================================================

@dataclass(frozen=True)
class MACDResult(_Record):
    macd: float = 0.0
    signal: float = 0.0
    histogram: float = 0.0
    trending: Bias = Bias.NEUTRAL


@dataclass(frozen=True)
class TrendState(_Record):
    direction: Bias = Bias.NEUTRAL
    strength: Strength = Strength.WEAK


@dataclass(frozen=True)
class IndicatorSet(_Record):
    """Per-call indicator snapshot. ``ema20/50/200`` hold the three configured periods."""
    current_price: float
    ema20: float
    ema50: float
    ema200: float
    rsi: float
    macd: MACDResult
    atr: float
    support: float
    resistance: float
    ema20_series: Tuple[float, ...]
    ema50_series: Tuple[float, ...]
    trend: TrendState
    volatility_level: Volatility


# ==============================================================================
# SECTION: Structure
# ==============================================================================

@dataclass(frozen=True)
class SwingPoint(_Record):
    index: int
    price: float
    time: Any
    kind: SwingKind


@dataclass(frozen=True)
class SwingSet(_Record):
    highs: Tuple[SwingPoint, ...] = ()
    lows: Tuple[SwingPoint, ...] = ()
    all: Tuple[SwingPoint, ...] = ()


@dataclass(frozen=True)
class StructuralBreak(_Record):
    kind: BreakKind
    level: float
    index: int
    time: Any
    distance: float
    description: str = ''

    @property
    def is_bullish(self) -> bool:
        return self.kind is BreakKind.BULLISH_BOS


@dataclass(frozen=True)
class ReversalEvent(_Record):
    kind: ReversalKind
    level: float
    index: int
    time: Any
    strength: Strength
    description: str = ''

    @property
    def is_bullish(self) -> bool:
        return self.kind is ReversalKind.BULLISH_CHOCH


@dataclass(frozen=True)
class OrderBlock(_Record):
    kind: OrderBlockKind
    high: float
    low: float
    midpoint: float
    index: int
    time: Any
    strength: float
    mitigated: bool = False
    description: str = ''

    @property
    def is_bullish(self) -> bool:
        return self.kind is OrderBlockKind.BULLISH_OB


@dataclass(frozen=True)
class ImbalanceZone(_Record):
    kind: ImbalanceKind
    high: float
    low: float
    midpoint: float
    size: float
    index: int
    time: Any
    filled: bool = False
    fill_percent: float = 0.0
    description: str = ''

    @property
    def is_bullish(self) -> bool:
        return self.kind is ImbalanceKind.BULLISH_FVG


@dataclass(frozen=True)
class LiquidityZone(_Record):
    kind: LiquidityKind
    level: float
    strength: float
    count: int
    description: str = ''


@dataclass(frozen=True)
class ZoneGroup(_Record):
    """A zone collection with its active/bullish/bearish views."""
    all: Tuple[Any, ...] = ()
    active: Tuple[Any, ...] = ()
    bullish: Tuple[Any, ...] = ()
    bearish: Tuple[Any, ...] = ()


@dataclass(frozen=True)
class LiquidityGroup(_Record):
    all: Tuple[LiquidityZone, ...] = ()
    bsl: Tuple[LiquidityZone, ...] = ()
    ssl: Tuple[LiquidityZone, ...] = ()


@dataclass(frozen=True)
class MarketStructure(_Record):
    type: StructureType = StructureType.RANGING
    hh: bool = False
    hl: bool = False
    lh: bool = False
    ll: bool = False


@dataclass(frozen=True)
class StructureSummary(_Record):
    total_bos: int = 0
    total_choch: int = 0
    active_order_blocks: int = 0
    active_fvgs: int = 0
    liquidity_zones: int = 0
    total_candles: int = 0


@dataclass(frozen=True)
class StructureBundle(_Record):
    swings: SwingSet = field(default_factory=SwingSet)
    bos: Tuple[StructuralBreak, ...] = ()
    choch: Tuple[ReversalEvent, ...] = ()
    order_blocks: ZoneGroup = field(default_factory=ZoneGroup)
    fvgs: ZoneGroup = field(default_factory=ZoneGroup)
    liquidity: LiquidityGroup = field(default_factory=LiquidityGroup)
    structure: MarketStructure = field(default_factory=MarketStructure)
    market_bias: Bias = Bias.NEUTRAL
    summary: StructureSummary = field(default_factory=StructureSummary)


# ==============================================================================
# SECTION: Scoring, signal, sizing
# ==============================================================================

@dataclass(frozen=True)
class FactorScores(_Record):
    smc_entry_zone: float = 0.0
    choch: float = 0.0
    order_block: float = 0.0
    fvg: float = 0.0
    bos: float = 0.0
    technical_indicators: float = 0.0
    trend_alignment: float = 0.0

    def items(self) -> Tuple[Tuple[str, float], ...]:
        return tuple((f.name, getattr(self, f.name)) for f in fields(self))


@dataclass(frozen=True)
class ScoreContribution(_Record):
    factor: str
    contribution: float


@dataclass(frozen=True)
class ConfluenceScore(_Record):
    scores: FactorScores = field(default_factory=FactorScores)
    total_score: float = 0.0
    direction: Direction = Direction.WAIT
    confidence: float = 30.0
    breakdown: Tuple[ScoreContribution, ...] = ()


@dataclass(frozen=True)
class Signal(_Record):
    direction: Direction = Direction.WAIT
    confidence: float = 30.0
    entry: float = 0.0
    stop_loss: float = 0.0
    tp1: float = 0.0
    tp2: float = 0.0
    tp3: float = 0.0
    rr: str = '0.00'
    reason: str = 'Insufficient data'
    setup: str = 'N/A'


@dataclass(frozen=True)
class PositionSizing(_Record):
    position_size: float = 0.0
    position_size_usd: float = 0.0
    risk_amount: float = 0.0
    account_risk_percent: float = 0.0
    sl_distance: float = 0.0
    expectancy: float = 0.0
    recommendation: str = 'WAIT'


@dataclass(frozen=True)
class AnalysisResult(_Record):
    timestamp: Any
    symbol: str
    timeframe: str
    data_points: int
    indicators: IndicatorSet
    smc: StructureBundle
    confluence: ConfluenceScore
    signal: Signal
    risk: PositionSizing
