"""Search strategies over candidate test sets."""

from culprit.strategy.bisect import Bisector

__all__ = ["Bisector"]
