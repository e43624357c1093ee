"""Tests for test discovery."""

import pytest

from culprit.core.errors import SetupError
from culprit.harness.discovery import discover_tests, parse_test_list

MARKER = "The following Tests are available:"

DOTNET_OUTPUT = """\
Test run for /src/Tests/bin/Debug/net8.0/Tests.dll (.NETCoreApp,Version=v8.0)
Microsoft (R) Test Execution Command Line Tool Version 17.8.0
Copyright (c) Microsoft Corporation.  All rights reserved.

The following Tests are available:
    Ns.ParserTests.ParsesEmpty
    Ns.ParserTests.ParsesNested
    Ns.EvalTests.Recurses(depth: 10)
"""


def test_parses_lines_after_marker():
    assert parse_test_list(DOTNET_OUTPUT, MARKER) == [
        "Ns.ParserTests.ParsesEmpty",
        "Ns.ParserTests.ParsesNested",
        "Ns.EvalTests.Recurses(depth: 10)",
    ]


def test_plain_list_without_marker():
    text = "A.One\n\n  A.Two  \nA.Three\n"
    assert parse_test_list(text, MARKER) == ["A.One", "A.Two", "A.Three"]


def test_duplicates_dropped_keeping_first_order():
    text = f"{MARKER}\nB\nA\nB\nC\nA\n"
    assert parse_test_list(text, MARKER) == ["B", "A", "C"]


def test_marker_with_nothing_after_it():
    assert parse_test_list(f"header\n{MARKER}\n", MARKER) == []


def test_discovers_from_fake_harness(make_config, make_artifact, tmp_path):
    artifact = make_artifact(tests=["Suite.A", "Suite.B"])
    output_file = tmp_path / "tests.txt"

    tests = discover_tests(make_config(), artifact, output_file=output_file)

    assert tests == ["Suite.A", "Suite.B"]
    assert output_file.read_text() == "Suite.A\nSuite.B\n"


def test_zero_tests_is_setup_error(make_config, make_artifact):
    artifact = make_artifact(tests=[])
    with pytest.raises(SetupError, match="No tests found"):
        discover_tests(make_config(), artifact)


def test_failing_list_command_is_setup_error(make_config, tmp_path):
    config = make_config(harness={"list_command": "echo broken >&2; exit 3"})
    with pytest.raises(SetupError, match="exit code 3") as excinfo:
        discover_tests(config, tmp_path)
    assert "broken" in str(excinfo.value)
