"""Discover command - list the tests in an artifact."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field
from pydantic_settings import CliPositionalArg

from culprit.core.errors import CulpritError, SetupError
from culprit.core.log import logger
from culprit.harness.discovery import discover_tests

if TYPE_CHECKING:
    from culprit.core.config import State


class DiscoverCommand(BaseModel):
    """Print the tests the harness finds in ARTIFACT, one per line."""

    artifact: CliPositionalArg[Path] = Field(
        description="Test assembly or project passed to the harness"
    )

    async def run_workflow(self, state: State) -> int:
        try:
            if not self.artifact.exists():
                raise SetupError(f"Test artifact not found: {self.artifact}")
            tests = discover_tests(state.config, self.artifact)
        except CulpritError as e:
            logger.error("{error}", error=str(e))
            return 1

        for test in tests:
            print(test)
        return 0
