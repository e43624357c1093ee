"""CLI command modules for culprit."""

from culprit.command.discover import DiscoverCommand
from culprit.command.run import RunCommand
from culprit.command.sdk import SdkCommand

__all__ = ["RunCommand", "DiscoverCommand", "SdkCommand"]
