"""SDK pin check against global.json."""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel

from culprit.core.config import Config
from culprit.core.errors import SetupError
from culprit.core.log import logger
from culprit.core.runner import Runner
from culprit.harness.commands import render_command

GLOBAL_JSON = "global.json"


class SdkStatus(BaseModel):
    """Required versus installed SDK."""

    global_json: Path | None = None
    required: str | None = None
    installed: str | None = None

    @property
    def ok(self) -> bool:
        """True unless a pin exists and the installed SDK differs."""
        if self.required is None:
            return True
        return self.installed == self.required


def find_global_json(start: Path) -> Path | None:
    """Nearest global.json in start or one of its parents."""
    start = start.resolve()
    if start.is_file():
        start = start.parent
    for directory in (start, *start.parents):
        candidate = directory / GLOBAL_JSON
        if candidate.is_file():
            return candidate
    return None


def required_sdk_version(path: Path) -> str | None:
    """The sdk.version pinned by a global.json, if any.

    Raises:
        SetupError: If the file is not valid JSON
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise SetupError(f"Invalid {path}: {e}") from e
    sdk = data.get("sdk") if isinstance(data, dict) else None
    if isinstance(sdk, dict):
        return sdk.get("version")
    return None


def installed_sdk_version(
    config: Config, runner: Runner | None = None
) -> str | None:
    """Version reported by the harness, or None if it cannot run."""
    runner = runner or Runner()
    harness = config.harness
    result = runner.execute(
        render_command(harness.version_command, harness), timeout=60
    )
    if not result.success:
        logger.debug(
            "SDK version query failed", returncode=result.returncode
        )
        return None
    lines = [line.strip() for line in result.output.splitlines()]
    lines = [line for line in lines if line]
    return lines[-1] if lines else None


def check_sdk(
    config: Config, start: Path, runner: Runner | None = None
) -> SdkStatus:
    """Compare the global.json pin above start with the installed SDK."""
    path = find_global_json(start)
    if path is None:
        return SdkStatus(installed=installed_sdk_version(config, runner))
    return SdkStatus(
        global_json=path,
        required=required_sdk_version(path),
        installed=installed_sdk_version(config, runner),
    )
