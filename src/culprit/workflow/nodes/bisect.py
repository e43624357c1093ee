"""BisectTests node - search the discovered tests."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, GraphRunContext

from culprit.core.config import State
from culprit.core.log import logger
from culprit.oracle.harness import HarnessOracle
from culprit.strategy.bisect import Bisector
from culprit.workflow.nodes.finalize import Finalize


@dataclass
class BisectTests(BaseNode[State]):
    """Run the bisector against the harness oracle."""

    async def run(self, ctx: GraphRunContext[State]) -> Finalize:
        run = ctx.state.runtime.run
        config = ctx.state.config
        run.status = "bisecting"

        oracle = HarnessOracle(config, run.artifact, run.run_dir)
        bisector = Bisector(
            oracle, verify_initial=config.bisect.verify_initial
        )

        with logger.span("Bisecting", tests=len(run.tests)):
            run.result = bisector.run(run.tests)

        return Finalize()
