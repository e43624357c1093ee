"""Bisect strategy - halve the candidate set until one test remains."""

from __future__ import annotations

from culprit.core.errors import SetupError
from culprit.core.log import logger
from culprit.core.result import BisectionResult, Outcome
from culprit.oracle.base import Oracle


class Bisector:
    """Half-interval search for the test that reproduces a failure.

    This is ddmin restricted to halves: each step keeps whichever half
    reproduces, preferring the first, and never tries complements. If
    neither half reproduces alone the search stops rather than
    guessing.
    """

    def __init__(self, oracle: Oracle, verify_initial: bool = True):
        """
        Args:
            oracle: Decides whether a subset reproduces the failure
            verify_initial: Check that the full set reproduces before
                splitting it
        """
        self.oracle = oracle
        self.verify_initial = verify_initial
        self.calls = 0

    def _reproduces(self, subset: list[str]) -> bool:
        self.calls += 1
        verdict = self.oracle.evaluate(subset)
        logger.debug(
            f"Oracle call {self.calls}: {len(subset)} tests -> "
            f"{verdict.value}"
        )
        # INCONCLUSIVE steers the search like DOES_NOT_REPRODUCE
        return verdict.reproduces

    def run(self, candidates: list[str]) -> BisectionResult:
        """Narrow `candidates` to a minimal reproducing subset.

        Args:
            candidates: Ordered test names whose full run reproduces
                the failure

        Returns:
            BisectionResult tagged CONFIRMED, UNCONFIRMED or
            COMBINATION

        Raises:
            SetupError: If candidates is empty, or if verify_initial
                is set and the full set does not reproduce
        """
        current = list(candidates)
        if not current:
            raise SetupError("No tests to bisect")

        # A single candidate is checked by the final verification
        if self.verify_initial and len(current) > 1:
            logger.info(f"Checking that all {len(current)} tests reproduce")
            if not self._reproduces(current):
                raise SetupError(
                    f"The full set of {len(current)} tests does not "
                    f"reproduce the failure; nothing to bisect"
                )

        step = 0
        while len(current) > 1:
            step += 1
            half = (len(current) + 1) // 2
            first, second = current[:half], current[half:]
            logger.info(
                f"Step {step}: {len(current)} candidates, trying "
                f"{len(first)} + {len(second)}"
            )

            if self._reproduces(first):
                current = first
                continue

            if self._reproduces(second):
                current = second
                continue

            logger.warn(
                f"Neither half of {len(current)} tests reproduces on "
                f"its own; stopping"
            )
            return BisectionResult(
                outcome=Outcome.COMBINATION,
                candidates=current,
                first_half=first,
                second_half=second,
                oracle_calls=self.calls,
            )

        logger.info("Verifying single candidate {test}", test=current[0])
        outcome = (
            Outcome.CONFIRMED if self._reproduces(current)
            else Outcome.UNCONFIRMED
        )
        return BisectionResult(
            outcome=outcome,
            candidates=current,
            oracle_calls=self.calls,
        )
