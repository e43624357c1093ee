"""Test discovery through the harness's list mode."""

from __future__ import annotations

from pathlib import Path

from culprit.core.config import Config
from culprit.core.errors import SetupError
from culprit.core.log import logger
from culprit.core.runner import Runner
from culprit.harness.commands import render_command


def parse_test_list(text: str, marker: str | None = None) -> list[str]:
    """Extract test names from list output.

    When `marker` occurs as a line, only the lines after it are
    names; otherwise every line is. Blank lines and repeats are
    dropped and first-seen order is kept.
    """
    lines = text.splitlines()
    if marker:
        stripped = [line.strip() for line in lines]
        if marker.strip() in stripped:
            lines = lines[stripped.index(marker.strip()) + 1:]

    seen = set()
    tests = []
    for line in lines:
        name = line.strip()
        if name and name not in seen:
            seen.add(name)
            tests.append(name)
    return tests


def discover_tests(
    config: Config,
    artifact: Path,
    runner: Runner | None = None,
    output_file: Path | None = None,
) -> list[str]:
    """List the tests contained in an artifact.

    Args:
        config: Loaded configuration
        artifact: Test assembly or project to inspect
        runner: Command runner (a fresh Runner when None)
        output_file: Where to save the discovered names, one per line

    Returns:
        Test names in discovery order

    Raises:
        SetupError: If the list command fails, times out, or yields
            no tests
    """
    runner = runner or Runner()
    harness = config.harness
    command = render_command(
        harness.list_command, harness, artifact=artifact
    )

    with logger.span("Discovering tests", artifact=str(artifact)):
        result = runner.execute(command, timeout=harness.discovery_timeout)

    if result.timed_out:
        raise SetupError(
            f"Test discovery timed out after {harness.discovery_timeout}s"
        )
    if not result.success:
        raise SetupError(
            f"Test discovery failed with exit code {result.returncode}:\n"
            f"{result.tail(config.oracle.tail_lines)}"
        )

    tests = parse_test_list(result.output, harness.list_marker)
    if not tests:
        raise SetupError(f"No tests found in {artifact}")

    if output_file:
        output_file.write_text("\n".join(tests) + "\n", encoding="utf-8")

    logger.info(f"Discovered {len(tests)} tests")
    return tests
