"""Oracle interface."""

from abc import abstractmethod
from enum import Enum
from typing import Protocol


class Verdict(str, Enum):
    """Answer to "does this subset reproduce the failure?"."""

    REPRODUCES = "reproduces"
    DOES_NOT_REPRODUCE = "does_not_reproduce"
    # Nothing was run (empty subset) or the run told us nothing
    INCONCLUSIVE = "inconclusive"

    @property
    def reproduces(self) -> bool:
        return self is Verdict.REPRODUCES


class Oracle(Protocol):
    """Predicate over subsets of tests.

    Implementations must not retry: one call, one attempt.
    """

    @abstractmethod
    def evaluate(self, subset: list[str]) -> Verdict:
        """Run exactly `subset` as one batch and classify the result."""
        pass
