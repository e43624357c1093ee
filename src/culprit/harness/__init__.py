"""Adapters around the external test harness."""

from culprit.harness.commands import render_command
from culprit.harness.discovery import discover_tests, parse_test_list
from culprit.harness.filter import (
    build_filter,
    escape_filter_value,
    write_runsettings,
)

__all__ = [
    "render_command",
    "discover_tests",
    "parse_test_list",
    "build_filter",
    "escape_filter_value",
    "write_runsettings",
]
