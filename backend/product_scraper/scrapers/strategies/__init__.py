"""Interchangeable extraction strategies."""

from .selector import SelectorStrategy
from .ai_assisted import AIAssistedStrategy

__all__ = [
    "SelectorStrategy",
    "AIAssistedStrategy",
]
