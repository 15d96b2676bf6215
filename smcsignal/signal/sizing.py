# smcsignal/signal/sizing.py
"""Position sizing: fixed-fraction risk, pure math, no I/O.

Formula::

    risk_amount   = account_size × (risk_percent / 100)
    position_size = risk_amount / |entry − stop_loss|
    expectancy    = win_rate × rr − (1 − win_rate)

``win_rate`` is ``AnalysisConfig.assumed_win_rate`` (default 0.60), a modelling
assumption not measured from any trade history.
"""
import math
from typing import Optional, Tuple

from smcsignal.config import AnalysisConfig
from smcsignal.models import Direction, PositionSizing, Signal

SHRINK_FACTOR = 0.95


def empty_sizing() -> PositionSizing:
    return PositionSizing()


def expectancy(rr: float, win_rate: float) -> float:
    """Expected R per trade for reward:risk ``rr`` at ``win_rate``."""
    return round(win_rate * rr - (1.0 - win_rate), 4)


def recommendation(confidence: float) -> str:
    if confidence < 50:
        return 'HIGH RISK - Consider passing'
    if confidence < 60:
        return 'MODERATE RISK - Small position'
    if confidence < 75:
        return 'GOOD RISK - Normal position'
    return 'EXCELLENT SETUP - Full position'


def cap_risk(
    size: float,
    sl_distance: float,
    account_size: float,
    target: float,
) -> Tuple[float, float]:
    """Shrink ``size`` by 5% if its realised risk fraction exceeds ``target``.

    Args:
        size: Units before the check.
        sl_distance: Absolute entry-to-stop distance.
        account_size: Account equity.
        target: Target risk as a fraction (0.02 for 2%).

    Returns:
        ``(size, realised)`` after at most one shrink, ``realised`` being the
        fraction of the account lost at the stop.
    """
    realised = size * sl_distance / account_size
    if realised > target and not math.isclose(realised, target):
        size *= SHRINK_FACTOR
        realised = size * sl_distance / account_size
    return size, realised


def size_position(
    signal: Signal,
    config: AnalysisConfig = AnalysisConfig(),
    account_size: Optional[float] = None,
) -> PositionSizing:
    """Size a trade so that hitting the stop loses ``risk_percent`` of the account.

    Args:
        signal: Output of ``build_signal``.
        config: Supplies ``account_size``, ``risk_percent`` and
            ``assumed_win_rate``.
        account_size: Overrides ``config.account_size`` for this call.

    Returns:
        All-zero sizing with recommendation ``'WAIT'`` for a WAIT signal or a
        zero stop distance. Otherwise units, notional (2 dp), the realised
        account risk in percent, expectancy (4 dp) and a confidence-tier
        recommendation.

    Raises:
        ValueError: If ``account_size`` is given and not positive.
    """
    if account_size is None:
        account_size = config.account_size
    elif account_size <= 0:
        raise ValueError(f"account_size must be positive, got {account_size}")

    if signal.direction is Direction.WAIT:
        return empty_sizing()

    sl_distance = abs(signal.entry - signal.stop_loss)
    if sl_distance == 0:
        return empty_sizing()

    target = config.risk_percent / 100.0
    risk_amount = account_size * target
    # size is derived from the target, so only float drift can trip the cap here
    size, realised = cap_risk(risk_amount / sl_distance, sl_distance, account_size, target)

    return PositionSizing(
        position_size=round(size, 8),
        position_size_usd=round(size * signal.entry, 2),
        risk_amount=round(risk_amount, 2),
        account_risk_percent=round(realised * 100, 2),
        sl_distance=round(sl_distance, 8),
        expectancy=expectancy(float(signal.rr), config.assumed_win_rate),
        recommendation=recommendation(signal.confidence),
    )
