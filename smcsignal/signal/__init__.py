# smcsignal/signal/__init__.py
"""
Scoring, Signal Construction & Position Sizing
==============================================

Turns indicator and structure snapshots into a trade decision:

- **Confluence**: seven bounded factors summed into a directional score
- **Signal**: entry, ATR/zone-based stop, 2R/2.5R/3R targets
- **Sizing**: fixed-fraction risk, expectancy, confidence-tier recommendation

All functions are pure and take immutable records.
"""

from .confluence import score_confluence, empty_confluence
from .builder import build_signal, empty_signal, identify_setup, signal_reason
from .sizing import size_position, empty_sizing, expectancy, recommendation

__all__ = [
    # Scoring
    "score_confluence",
    "empty_confluence",

    # Signal
    "build_signal",
    "signal_reason",
    "identify_setup",
    "empty_signal",

    # Sizing
    "size_position",
    "expectancy",
    "recommendation",
    "empty_sizing",
]
