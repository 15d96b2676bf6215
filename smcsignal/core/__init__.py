from .swings import detect_swing_masks, detect_swings
from .breaks import detect_bos, detect_choch
from .structure import determine_market_bias, infer_market_structure
from .detector import detect_structure, empty_structure

__all__ = [
    # Swing and event detection
    "detect_swing_masks",
    "detect_swings",
    "detect_bos",
    "detect_choch",

    # Structure labelling
    "infer_market_structure",
    "determine_market_bias",

    # Full bundle
    "detect_structure",
    "empty_structure",
]
