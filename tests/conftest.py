"""Pytest configuration and fixtures for culprit tests."""

import json
import sys
import tempfile
from pathlib import Path

import pytest

from culprit.core.log import ConsoleSink, setup_logger

FAKE_HARNESS = Path(__file__).parent / "fixtures" / "fake_harness.py"


@pytest.fixture(autouse=True, scope="session")
def configure_logging():
    """Console-only debug logging for test runs."""
    test_log_root = Path(tempfile.gettempdir()) / "culprit-tests"
    setup_logger(
        log_root=test_log_root,
        run_name="test",
        console=ConsoleSink(level="debug"),
    )


@pytest.fixture
def mock_argv(monkeypatch):
    """Minimal argv so State's CLI parsing ignores pytest's args."""
    monkeypatch.setattr(sys, "argv", ["culprit"])


@pytest.fixture
def harness_config():
    """Harness settings that drive tests/fixtures/fake_harness.py."""
    return {
        "binary": f'"{sys.executable}" "{FAKE_HARNESS}"',
        "list_command": "{binary} {artifact} --list-tests",
        "run_command": "{binary} {artifact} --settings {settings}",
        "version_command": "{binary} --version",
    }


@pytest.fixture
def make_state(mock_argv, harness_config):
    """Build a State over the package defaults plus overrides."""
    from culprit.core.config import State

    def _make(oracle=None, bisect=None, harness=None):
        config = {
            "harness": {**harness_config, **(harness or {})},
            "oracle": oracle or {},
            "bisect": bisect or {},
        }
        return State(config=config)

    return _make


@pytest.fixture
def make_config(make_state):
    """Build a Config over the package defaults plus overrides."""
    def _make(**kwargs):
        return make_state(**kwargs).config

    return _make


@pytest.fixture
def make_artifact(tmp_path):
    """Write a fake test artifact describing how each test behaves.

    Keys: tests (all names), crash (any one present overflows),
    together (overflows only when all present), hang (sleeps),
    fail (ordinary assertion failure), spawn_child (a hanging test
    leaves a sleeping child process behind, like a testhost).
    """
    def _make(name="Tests.dll", **behaviour):
        path = tmp_path / name
        path.write_text(json.dumps(behaviour))
        return path

    return _make
