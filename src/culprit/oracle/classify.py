"""Classification of a batch run."""

from __future__ import annotations

import re
from collections.abc import Iterable
from enum import Enum

from culprit.core.result import BatchResult
from culprit.oracle.base import Verdict


class BatchOutcome(str, Enum):
    """What happened when a batch ran."""

    CRASH = "crash"
    TIMEOUT = "timeout"
    OTHER_FAILURE = "other_failure"
    PASS = "pass"
    EMPTY = "empty"

    @property
    def verdict(self) -> Verdict:
        if self in (BatchOutcome.CRASH, BatchOutcome.TIMEOUT):
            return Verdict.REPRODUCES
        if self is BatchOutcome.EMPTY:
            return Verdict.INCONCLUSIVE
        return Verdict.DOES_NOT_REPRODUCE


def compile_signatures(patterns: Iterable[str]) -> list[re.Pattern]:
    return [re.compile(p, re.IGNORECASE) for p in patterns]


def classify(
    result: BatchResult, signatures: Iterable[re.Pattern]
) -> BatchOutcome:
    """Classify a batch, first matching rule wins.

    1. A signature in the output is a crash, even after a timeout.
    2. A timeout counts as the crash: the target failure often
       hangs the test host instead of reporting.
    3. Any other non-zero exit is an unrelated failure.
    4. Otherwise the batch passed.
    """
    if any(sig.search(result.output) for sig in signatures):
        return BatchOutcome.CRASH
    if result.timed_out:
        return BatchOutcome.TIMEOUT
    if result.returncode != 0:
        return BatchOutcome.OTHER_FAILURE
    return BatchOutcome.PASS
