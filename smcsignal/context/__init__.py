# smcsignal/context/__init__.py
"""
Zone layer: order blocks, fair value gaps and liquidity pools.
Detection and annotation (mitigation, fill) are separate pure passes.
"""

from .zones import annotate_mitigation, detect_order_blocks
from .imbalance import annotate_fills, detect_imbalances
from .liquidity import cluster_prices, detect_liquidity_zones, dynamic_tolerance


__all__ = [
    # Order blocks
    'detect_order_blocks',
    'annotate_mitigation',

    # Fair value gaps
    'detect_imbalances',
    'annotate_fills',

    # Liquidity
    'dynamic_tolerance',
    'cluster_prices',
    'detect_liquidity_zones',
]
