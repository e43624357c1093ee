"""DiscoverTests node - list the tests in the artifact."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, GraphRunContext

from culprit.core.config import State
from culprit.harness.discovery import discover_tests
from culprit.workflow.nodes.bisect import BisectTests


@dataclass
class DiscoverTests(BaseNode[State]):
    """Discover the candidate tests; the run aborts if there are none."""

    async def run(self, ctx: GraphRunContext[State]) -> BisectTests:
        run = ctx.state.runtime.run
        run.status = "discovering"
        run.tests = discover_tests(
            ctx.state.config,
            run.artifact,
            output_file=run.run_dir / "tests.txt",
        )
        return BisectTests()
