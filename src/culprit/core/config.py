"""Application configuration and runtime state."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

import platformdirs
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from culprit.core.base import BaseConfig, BaseState
from culprit.core.log import Logger
from culprit.core.result import BisectionResult
from culprit.core.yaml_settings import YamlWithIncludesSettingsSource

# Names usable in {module.attr} templates inside YAML values,
# e.g. {platformdirs.user_state_dir} or {Path.home}
TEMPLATE_NAMESPACE = {
    'os': os,
    'platformdirs': platformdirs,
    'Path': Path,
}

_TEMPLATE = re.compile(r'\{([a-z_][a-z_.]*)\}', re.IGNORECASE)


# ============================================================
# CONFIG MODELS (loaded from YAML/env/CLI)
# ============================================================

class HarnessConfig(BaseConfig):
    """External test harness invocation.

    Command templates take the runtime placeholders {binary},
    {artifact}, {filter} and {settings}; each value is shell-quoted
    before it is substituted. {settings} is a .runsettings file
    carrying the filter, which keeps large batches off the command
    line.
    """

    binary: str = Field(
        default="dotnet",
        description="Test harness executable, looked up on PATH",
    )
    list_command: str = Field(
        default="{binary} test {artifact} --list-tests",
        description="Command that prints the tests in an artifact",
    )
    run_command: str = Field(
        default=(
            "{binary} test {artifact} --no-build --no-restore "
            "--settings {settings}"
        ),
        description=(
            "Command that runs the tests selected by {settings} "
            "(or {filter})"
        ),
    )
    version_command: str = Field(
        default="{binary} --version",
        description="Command that prints the installed SDK version",
    )
    list_marker: str = Field(
        default="The following Tests are available:",
        description=(
            "Line in discovery output after which test names are "
            "listed; when absent every line is a test name"
        ),
    )
    filter_property: str = Field(
        default="FullyQualifiedName",
        description="Test property matched by each filter term",
    )
    discovery_timeout: int | None = Field(
        default=600,
        description="Timeout for test discovery in seconds",
    )


class OracleConfig(BaseConfig):
    """Batch classification settings."""

    timeout: int | None = Field(
        default=300,
        description=(
            "Seconds before a batch is killed and counted as "
            "reproducing; 0 or null runs batches untimed"
        ),
    )
    signatures: list[str] = Field(
        default_factory=lambda: [
            r"stack\s*overflow",
            r"System\.StackOverflowException",
        ],
        description=(
            "Case-insensitive regexes; a match in batch output means "
            "the failure reproduced"
        ),
    )
    tail_lines: int = Field(
        default=20,
        description="Output lines to show when a batch fails otherwise",
    )


class BisectConfig(BaseConfig):
    """Search behaviour."""

    verify_initial: bool = Field(
        default=True,
        description=(
            "Run the full test set once before bisecting and abort "
            "if it does not reproduce"
        ),
    )


class Config(BaseConfig):
    """Configuration loaded from YAML/env/CLI.

    Treated as a read-only snapshot for the whole run; per-run values
    live in Runtime.
    """

    logger: Logger = Field(
        default_factory=Logger,
        description="Logger sinks and levels",
    )
    harness: HarnessConfig = Field(default_factory=HarnessConfig)
    oracle: OracleConfig = Field(default_factory=OracleConfig)
    bisect: BisectConfig = Field(default_factory=BisectConfig)

    run_name: str = Field(
        default="bisect",
        description="Name for this run's log directory",
    )
    log_root: Path = Field(
        default_factory=(
            lambda: Path(platformdirs.user_state_dir()) / "culprit"
        ),
        description=(
            "Root directory for log files "
            "(supports {platformdirs.*} templates)"
        ),
    )

    @model_validator(mode='after')
    def _setup_logger(self) -> 'Config':
        """Install the global logger from the loaded sink settings."""
        from culprit.core.log import setup_logger

        setup_logger(
            log_root=self.log_root,
            run_name=self.run_name,
            console=self.logger.console,
            otlp=self.logger.otlp,
            file=self.logger.file,
            level=self.logger.level,
        )
        return self

    def close(self):
        from culprit.core.log import logger
        logger.close()
        super().close()


# ============================================================
# RUNTIME STATE MODELS (mutable during a run)
# ============================================================

class RunState(BaseState):
    """State of the bisection workflow."""

    artifact: Path | None = Field(
        default=None, description="Test artifact under investigation"
    )
    run_dir: Path | None = Field(
        default=None,
        description="Temporary directory holding this run's files",
    )
    tests: list[str] = Field(
        default_factory=list, description="Discovered test names"
    )
    result: BisectionResult | None = Field(
        default=None, description="Outcome, set when bisection ends"
    )
    status: str = Field(
        default="pending",
        description="pending, discovering, bisecting, complete",
    )

    model_config = ConfigDict(arbitrary_types_allowed=True)


class Runtime(BaseModel):
    """Container for per-workflow runtime sections."""

    run: RunState = Field(default_factory=RunState)


# ============================================================
# STATE (config + runtime)
# ============================================================

class State(BaseSettings):
    """Configuration plus runtime state; flows through every node.

    Sources, highest priority first: CLI, init arguments, environment
    variables (CULPRIT_ prefix, __ as the nesting delimiter), .env,
    YAML files with includes.
    """

    config: Config = Field(
        default_factory=Config,
        description="Application configuration (from YAML/env/CLI)",
    )
    runtime: Runtime = Field(
        default_factory=Runtime,
        description="Runtime state (mutates during a run)",
    )
    include: list[str] | None = Field(
        default=None,
        description=(
            "Additional YAML files to deep-merge over the defaults. "
            "Use --include on the CLI or include: in YAML files."
        ),
    )

    model_config = SettingsConfigDict(
        yaml_file="culprit.yaml",
        env_file=".env",
        env_prefix="CULPRIT_",
        env_nested_delimiter="__",
        cli_parse_args=True,
        cli_implicit_flags=True,
        cli_use_class_docs_for_groups=True,
        arbitrary_types_allowed=True,
        extra='ignore',
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlWithIncludesSettingsSource(settings_cls),
            file_secret_settings,
        )

    @model_validator(mode="after")
    def substitute_templates(self) -> "State":
        """Resolve {config.*} and {platformdirs.*} templates.

        Placeholders that do not name an attribute (the harness
        command's {binary}, {artifact}, {filter}) stay as they are.
        """
        self._substitute_recursive(self.config)
        return self

    def _substitute_recursive(self, obj: Any) -> None:
        if isinstance(obj, BaseModel):
            for field_name in obj.__class__.model_fields:
                value = getattr(obj, field_name)
                new_value = self._substitute_value(value)
                if new_value is not value:
                    setattr(obj, field_name, new_value)
        elif isinstance(obj, dict):
            for key in obj:
                obj[key] = self._substitute_value(obj[key])
        elif isinstance(obj, list):
            for i, item in enumerate(obj):
                obj[i] = self._substitute_value(item)

    def _substitute_value(self, value: Any) -> Any:
        if isinstance(value, str):
            return self._substitute_string(value)
        if isinstance(value, Path):
            return Path(self._substitute_string(str(value)))
        if isinstance(value, (BaseModel, dict, list)):
            self._substitute_recursive(value)
        return value

    def _substitute_string(self, value: str) -> str:
        """Replace {dotted.path} references with their values.

        Examples:
            "{config.log_root}/reports" -> "/home/u/.local/state/culprit/reports"
            "{platformdirs.user_cache_dir}" -> "/home/u/.cache/culprit"
        """
        def replace(match):
            parts = match.group(1).split(".")
            if parts[0] in TEMPLATE_NAMESPACE:
                obj = TEMPLATE_NAMESPACE[parts[0]]
                parts = parts[1:]
            else:
                obj = self
            try:
                for part in parts:
                    obj = getattr(obj, part)
                if callable(obj):
                    if match.group(1).startswith("platformdirs."):
                        obj = obj('culprit', appauthor=False)
                    else:
                        obj = obj()
                return str(obj)
            except (AttributeError, TypeError):
                return match.group(0)

        return _TEMPLATE.sub(replace, value)


__all__ = [
    "State",
    "Config",
    "HarnessConfig",
    "OracleConfig",
    "BisectConfig",
    "RunState",
]
