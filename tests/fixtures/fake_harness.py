#!/usr/bin/env python3
"""Stand-in for `dotnet test` driven by a JSON artifact.

    fake_harness.py ARTIFACT --list-tests
    fake_harness.py ARTIFACT --filter EXPR
    fake_harness.py ARTIFACT --settings RUNSETTINGS
    fake_harness.py --version
"""

import json
import subprocess
import sys
import time
import xml.etree.ElementTree as ET


def split_filter(expr):
    """Split on unescaped '|' and strip backslash escapes."""
    terms, current, i = [], [], 0
    while i < len(expr):
        c = expr[i]
        if c == "\\" and i + 1 < len(expr):
            current.append(expr[i + 1])
            i += 2
            continue
        if c == "|":
            terms.append("".join(current))
            current = []
        else:
            current.append(c)
        i += 1
    terms.append("".join(current))
    return [t.split("=", 1)[1] for t in terms if "=" in t]


def main(argv):
    if argv[:1] == ["--version"]:
        print("8.0.100")
        return 0

    with open(argv[0]) as f:
        behaviour = json.load(f)

    if argv[1] == "--list-tests":
        print("Test run for fake artifact")
        print()
        print("The following Tests are available:")
        for name in behaviour["tests"]:
            print(f"    {name}")
        return 0

    if argv[1] == "--settings":
        expr = ET.parse(argv[2]).getroot().findtext(".//TestCaseFilter")
    else:
        expr = argv[2]
    selected = set(split_filter(expr))
    print(f"Running {len(selected)} tests")
    sys.stdout.flush()

    together = set(behaviour.get("together", []))
    if selected & set(behaviour.get("crash", [])) or (
        together and together <= selected
    ):
        print("Stack overflow.")
        print("   at Fake.Recurse()")
        return 134
    if selected & set(behaviour.get("hang", [])):
        if behaviour.get("spawn_child"):
            # Like a testhost: inherits stdout and outlives a killed parent
            subprocess.Popen(
                [sys.executable, "-c", "import time; time.sleep(30)"]
            )
        time.sleep(30)
        return 0
    if selected & set(behaviour.get("fail", [])):
        print("Failed Fake.Assertion")
        return 1
    print("Passed!")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
