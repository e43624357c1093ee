"""Run command - bisect an artifact's tests."""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field
from pydantic_settings import CliPositionalArg

from culprit.core.errors import CulpritError
from culprit.core.log import logger

if TYPE_CHECKING:
    from culprit.core.config import State


class RunCommand(BaseModel):
    """Find the test that makes a test run crash.

    Discovers the tests in ARTIFACT, checks that running all of them
    reproduces the crash signature, then halves the set until a single
    test remains. Exits 0 whenever the search completes, whatever it
    found, and 1 when the run cannot start.
    """

    artifact: CliPositionalArg[Path] = Field(
        description="Test assembly or project passed to the harness"
    )

    async def run_workflow(self, state: State) -> int:
        """Run the bisection graph.

        Every transient file lives in one temporary directory that is
        removed however the run ends.

        Returns:
            Exit code (0=completed, 1=setup failure)
        """
        from culprit.workflow.graph import create_workflow
        from culprit.workflow.nodes.initialize import Initialize

        run = state.runtime.run
        run.artifact = self.artifact
        workflow = create_workflow()

        try:
            with tempfile.TemporaryDirectory(prefix="culprit-") as run_dir:
                run.run_dir = Path(run_dir)
                async with workflow.iter(Initialize(), state=state) as graph:
                    async for _node in graph:
                        pass
        except CulpritError as e:
            logger.error("{error}", error=str(e))
            return 1
        finally:
            run.run_dir = None

        return 0
