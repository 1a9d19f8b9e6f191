"""Trading strategy generation for Crypto Sensei analysis."""

from .types import StrategySnapshot
from .generator import StrategyGenerator, default_strategy, generate_strategy

__all__ = [
    "StrategySnapshot",
    "StrategyGenerator",
    "default_strategy",
    "generate_strategy",
]
