"""Tests for the global.json SDK check."""

import json

import pytest

from culprit.core.errors import SetupError
from culprit.harness.sdk import (
    SdkStatus,
    check_sdk,
    find_global_json,
    required_sdk_version,
)


def write_global_json(directory, version="8.0.100"):
    path = directory / "global.json"
    path.write_text(json.dumps({"sdk": {"version": version}}))
    return path


def test_finds_global_json_in_parent(tmp_path):
    path = write_global_json(tmp_path)
    nested = tmp_path / "src" / "Tests"
    nested.mkdir(parents=True)

    assert find_global_json(nested) == path.resolve()


def test_start_may_be_a_file(tmp_path):
    path = write_global_json(tmp_path)
    artifact = tmp_path / "Tests.dll"
    artifact.write_text("")

    assert find_global_json(artifact) == path.resolve()


def test_required_version(tmp_path):
    assert required_sdk_version(write_global_json(tmp_path)) == "8.0.100"


def test_missing_sdk_key(tmp_path):
    path = tmp_path / "global.json"
    path.write_text('{"msbuild-sdks": {}}')
    assert required_sdk_version(path) is None


def test_invalid_json_is_setup_error(tmp_path):
    path = tmp_path / "global.json"
    path.write_text("{not json")
    with pytest.raises(SetupError):
        required_sdk_version(path)


def test_matching_sdk_is_ok(make_config, tmp_path):
    write_global_json(tmp_path, "8.0.100")
    status = check_sdk(make_config(), tmp_path)

    assert status.required == "8.0.100"
    assert status.installed == "8.0.100"
    assert status.ok


def test_mismatched_sdk_is_not_ok(make_config, tmp_path):
    write_global_json(tmp_path, "9.0.200")
    status = check_sdk(make_config(), tmp_path)

    assert status.installed == "8.0.100"
    assert not status.ok


def test_unpinned_is_always_ok():
    assert SdkStatus(installed=None).ok
    assert SdkStatus(required="8.0.100", installed=None).ok is False
