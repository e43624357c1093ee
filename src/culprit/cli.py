#!/usr/bin/env python3
"""culprit CLI - isolate the test that crashes a test run."""

import asyncio
import sys

from pydantic_settings import CliApp, CliSubCommand, get_subcommand

from culprit.command.discover import DiscoverCommand
from culprit.command.run import RunCommand
from culprit.command.sdk import SdkCommand
from culprit.core.config import State
from culprit.core.log import logger


class CliState(State):
    """Bisect a test suite to find the test behind a crash.

    Runs halves of the suite through the test harness (dotnet test by
    default) until a single test reproduces the crash signature, a
    stack overflow unless configured otherwise.

    Configuration sources (in priority order):
    1. Command-line arguments (--config.oracle.timeout 120)
    2. Environment variables (CULPRIT_CONFIG__ORACLE__TIMEOUT=120)
    3. .env file
    4. --include files, ./culprit.yaml, the user config, defaults
    """

    run: CliSubCommand[RunCommand]
    discover: CliSubCommand[DiscoverCommand]
    sdk: CliSubCommand[SdkCommand]

    def cli_cmd(self):
        """Dispatch to the active subcommand, or show help."""
        subcommand = get_subcommand(self, is_required=False)

        if subcommand is None:
            CliApp.run(CliState, cli_args=['--help'])
            sys.exit(1)

        # Closing the logger flushes file and OTLP sinks
        with logger:
            exit_code = asyncio.run(subcommand.run_workflow(self))
            raise SystemExit(exit_code)


def main():
    """Main entry point for CLI."""
    CliApp.run(CliState)


if __name__ == "__main__":
    main()
