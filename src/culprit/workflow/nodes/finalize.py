"""Finalize node - report the outcome."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, End, GraphRunContext

from culprit.core.config import State
from culprit.core.log import logger
from culprit.core.result import BisectionResult, Outcome


@dataclass
class Finalize(BaseNode[State, None, BisectionResult]):
    """Log the bisection outcome and end the run."""

    async def run(
        self, ctx: GraphRunContext[State]
    ) -> End[BisectionResult]:
        result = ctx.state.runtime.run.result
        if result is None:
            raise ValueError("Finalize reached without a bisection result")

        ctx.state.runtime.run.status = "complete"

        if result.outcome is Outcome.CONFIRMED:
            logger.info("{summary}", summary=result.describe())
        else:
            logger.warn("{summary}", summary=result.describe())
            if result.outcome is Outcome.COMBINATION:
                logger.info(
                    "First half: {tests}", tests=result.first_half
                )
                logger.info(
                    "Second half: {tests}", tests=result.second_half
                )

        logger.info(f"Finished after {result.oracle_calls} oracle calls")
        return End(result)
