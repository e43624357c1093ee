"""Sdk command - compare the global.json pin with the installed SDK."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

from culprit.core.errors import CulpritError
from culprit.core.log import logger
from culprit.harness.sdk import check_sdk

if TYPE_CHECKING:
    from culprit.core.config import State


class SdkCommand(BaseModel):
    """Check that the installed SDK matches global.json.

    Looks for global.json in PATH and its parents. Exits 1 when a pin
    exists and the installed version differs. Nothing is installed.
    """

    path: Path = Field(
        default_factory=Path.cwd,
        description="Directory to search upward from for global.json",
    )

    async def run_workflow(self, state: State) -> int:
        try:
            status = check_sdk(state.config, self.path)
        except CulpritError as e:
            logger.error("{error}", error=str(e))
            return 1

        print(f"global.json: {status.global_json or 'not found'}")
        print(f"required:    {status.required or 'any'}")
        print(f"installed:   {status.installed or 'not found'}")

        if not status.ok:
            logger.error(
                f"Installed SDK {status.installed or 'none'} does not "
                f"match required {status.required}"
            )
            return 1
        return 0
