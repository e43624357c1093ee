"""Graph workflow definition."""

from pydantic_graph import Graph

from culprit.core.config import State
from culprit.core.log import logger


def create_workflow():
    """Create the bisection workflow graph.

    Initialize → DiscoverTests → BisectTests → Finalize → End

    Returns:
        Graph workflow with State as state_type
    """
    logger.debug("Building workflow graph")

    from culprit.workflow.nodes.bisect import BisectTests
    from culprit.workflow.nodes.discover import DiscoverTests
    from culprit.workflow.nodes.finalize import Finalize
    from culprit.workflow.nodes.initialize import Initialize

    return Graph(
        nodes=(Initialize, DiscoverTests, BisectTests, Finalize),
        state_type=State,
    )
