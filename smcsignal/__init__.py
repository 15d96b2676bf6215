# __init__.py
"""Smart-money market structure analysis and confluence signal scoring."""

from .cache import AnalysisCache
from .config import AnalysisConfig
from .engine import analyze
from .errors import InvalidInputError
from .models import AnalysisResult, Candle, Direction

__all__ = [
    'analyze',
    'AnalysisConfig',
    'AnalysisCache',
    'AnalysisResult',
    'Candle',
    'Direction',
    'InvalidInputError',
]
