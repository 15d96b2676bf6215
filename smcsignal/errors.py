# smcsignal/errors.py
"""Errors raised to callers of the analysis pipeline."""


class InvalidInputError(ValueError):
    """Candle sequence too short, or an OHLC field non-numeric/non-positive."""
