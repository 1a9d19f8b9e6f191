"""Crypto Sensei: technical indicator, market phase and trading strategy engine."""

__version__ = "0.1.0"
