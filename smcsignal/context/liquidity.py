# smcsignal/context/liquidity.py
"""
Liquidity pools: clusters of near-equal swing highs (BSL) and swing lows (SSL).
"""
from typing import List, Tuple
import numpy as np
from smcsignal.metrics.candles import CandleArrays
from smcsignal.metrics.range import average_range
from smcsignal.metrics.types import round_price
from smcsignal.models import LiquidityGroup, LiquidityKind, LiquidityZone, SwingSet

TOLERANCE_WINDOW = 20


def dynamic_tolerance(candles: CandleArrays, fallback: float = 0.001) -> float:
    """
    Relative clustering tolerance scaled by recent volatility.

    ``(mean range / mean close) × 0.5`` over the last 20 candles; ``fallback``
    when that is not positive (flat or empty input).
    """
    count = min(TOLERANCE_WINDOW, len(candles))
    if count == 0:
        return fallback
    avg_price = float(np.mean(candles.close[-count:]))
    if avg_price <= 0:
        return fallback
    tolerance = average_range(candles.ranges, TOLERANCE_WINDOW) / avg_price * 0.5
    return tolerance if tolerance > 0 else fallback


def cluster_prices(
        prices: np.ndarray,
        tolerance: float
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Greedy clustering on relative distance to each cluster's running mean.

    Parameters
    ----------
    prices : np.ndarray[float64]
        Swing prices in detection (index) order.
    tolerance : float
        A price joins the first cluster with ``|mean - price| / price < tolerance``.

    Returns
    -------
    Tuple[np.ndarray, np.ndarray]
        - cluster_centers: mean price per cluster
        - cluster_counts: members per cluster

        Both ordered by count, descending (stable on creation order).

    Notes
    -----
    - Order-dependent: a cluster's mean moves as members join.
    - Time Complexity: O(m·k) for m prices and k clusters.
    """
    if len(prices) == 0:
        return np.array([], dtype=np.float64), np.array([], dtype=np.int64)

    sums: List[float] = []
    counts: List[int] = []

    for price in prices:
        price = float(price)
        for k in range(len(sums)):
            center = sums[k] / counts[k]
            if price > 0 and abs(center - price) / price < tolerance:
                sums[k] += price
                counts[k] += 1
                break
        else:
            sums.append(price)
            counts.append(1)

    cluster_counts = np.array(counts, dtype=np.int64)
    cluster_centers = np.array(sums, dtype=np.float64) / cluster_counts
    order = np.argsort(-cluster_counts, kind='stable')
    return cluster_centers[order], cluster_counts[order]


def _zones(
        centers: np.ndarray,
        counts: np.ndarray,
        kind: LiquidityKind,
        label: str
) -> List[LiquidityZone]:
    zones = []
    for center, count in zip(centers, counts):
        level = round_price(center)
        zones.append(LiquidityZone(
            kind=kind,
            level=level,
            strength=float(min(100, int(count) * 25)),
            count=int(count),
            description=f"{label} Liquidity @ {level:.4f}",
        ))
    return zones


def detect_liquidity_zones(
        candles: CandleArrays,
        swings: SwingSet,
        fallback_tolerance: float = 0.001
) -> LiquidityGroup:
    """
    Cluster swing highs into buy-side and swing lows into sell-side liquidity.

    Returns
    -------
    LiquidityGroup
        ``all`` sorted by strength descending (stable, BSL before SSL on ties),
        ``bsl`` / ``ssl`` filtered views of it.
    """
    tolerance = dynamic_tolerance(candles, fallback_tolerance)

    high_prices = np.array([s.price for s in swings.highs], dtype=np.float64)
    low_prices = np.array([s.price for s in swings.lows], dtype=np.float64)

    zones = _zones(*cluster_prices(high_prices, tolerance), LiquidityKind.BSL, 'Buy-Side')
    zones += _zones(*cluster_prices(low_prices, tolerance), LiquidityKind.SSL, 'Sell-Side')
    zones.sort(key=lambda z: z.strength, reverse=True)

    return LiquidityGroup(
        all=tuple(zones),
        bsl=tuple(z for z in zones if z.kind is LiquidityKind.BSL),
        ssl=tuple(z for z in zones if z.kind is LiquidityKind.SSL),
    )
