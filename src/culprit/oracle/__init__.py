"""Oracles decide whether a subset of tests reproduces the failure."""

from culprit.oracle.base import Oracle, Verdict
from culprit.oracle.classify import BatchOutcome, classify
from culprit.oracle.harness import HarnessOracle

__all__ = ["Oracle", "Verdict", "BatchOutcome", "classify", "HarnessOracle"]
