"""Initialize node - validate the artifact and the harness."""

from __future__ import annotations

import shlex
import shutil
from dataclasses import dataclass

from pydantic_graph import BaseNode, GraphRunContext

from culprit.core.config import State
from culprit.core.errors import OracleInvocationError, SetupError
from culprit.core.log import logger
from culprit.harness.sdk import check_sdk, find_global_json
from culprit.workflow.nodes.discover import DiscoverTests


@dataclass
class Initialize(BaseNode[State]):
    """Fail fast on anything that would make every batch meaningless."""

    async def run(self, ctx: GraphRunContext[State]) -> DiscoverTests:
        """Check the artifact exists and the harness is on PATH.

        Raises:
            SetupError: If the artifact does not exist
            OracleInvocationError: If the harness binary is missing
        """
        run = ctx.state.runtime.run
        harness = ctx.state.config.harness

        if run.artifact is None or not run.artifact.exists():
            raise SetupError(f"Test artifact not found: {run.artifact}")

        executable = shlex.split(harness.binary)[0]
        if shutil.which(executable) is None:
            raise OracleInvocationError(
                f"Test harness '{executable}' not found on PATH"
            )

        if find_global_json(run.artifact) is not None:
            status = check_sdk(ctx.state.config, run.artifact)
            if not status.ok:
                logger.warn(
                    f"{status.global_json} pins SDK {status.required} "
                    f"but {status.installed or 'none'} is installed"
                )

        logger.info(f"Bisecting tests in {run.artifact}")
        return DiscoverTests()
