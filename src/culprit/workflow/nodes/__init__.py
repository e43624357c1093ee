"""Workflow nodes for the bisection graph."""

from culprit.workflow.nodes.bisect import BisectTests
from culprit.workflow.nodes.discover import DiscoverTests
from culprit.workflow.nodes.finalize import Finalize
from culprit.workflow.nodes.initialize import Initialize

__all__ = [
    "Initialize",
    "DiscoverTests",
    "BisectTests",
    "Finalize",
]
