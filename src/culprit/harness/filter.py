"""Test filter expressions for `dotnet test`.

A filter naming thousands of tests does not fit in one command-line
argument, so batches pass it through a .runsettings file instead of
--filter.
"""

import xml.etree.ElementTree as ET
from pathlib import Path

# Characters with meaning in the filter grammar; a backslash makes
# them literal inside a property value.
_SPECIAL = "\\()&|=!~"


def escape_filter_value(value: str) -> str:
    """Backslash-escape filter metacharacters in a test name."""
    return "".join("\\" + c if c in _SPECIAL else c for c in value)


def build_filter(
    tests: list[str], prop: str = "FullyQualifiedName"
) -> str:
    """Build a filter matching exactly the given tests.

    Args:
        tests: Fully-qualified test names
        prop: Test property compared by each term

    Returns:
        Terms of the form ``prop=name`` joined by ``|``

    Raises:
        ValueError: If tests is empty; an empty filter would match
            every test in the artifact
    """
    if not tests:
        raise ValueError("Cannot build a filter for zero tests")
    return "|".join(f"{prop}={escape_filter_value(t)}" for t in tests)


def write_runsettings(path: Path, filter_expr: str) -> Path:
    """Write a .runsettings file whose TestCaseFilter is filter_expr."""
    root = ET.Element("RunSettings")
    run_config = ET.SubElement(root, "RunConfiguration")
    ET.SubElement(run_config, "TestCaseFilter").text = filter_expr
    ET.ElementTree(root).write(path, encoding="utf-8", xml_declaration=True)
    return path
