import numpy as np
from typing import TypeAlias
from numpy.typing import NDArray

# float64 throughout: outputs are rounded to 8 decimals and must be reproducible
FloatArray: TypeAlias = NDArray[np.float64]
BoolArray: TypeAlias = NDArray[np.bool_]

Prices      = FloatArray
ATRArray    = FloatArray       # volatility in price units
RangeArray  = FloatArray       # high - low per bar

SwingsMask  = BoolArray

PRECISION = 8


def round_price(value: float, places: int = PRECISION) -> float:
    """Round to the fixed output precision, returning a plain float."""
    return round(float(value), places)
