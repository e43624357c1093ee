"""Base classes shared by configuration and runtime models.

Kept apart from config.py so that log.py can subclass BaseConfig
without importing the full configuration tree.
"""

from __future__ import annotations

import sys
from typing import Protocol, runtime_checkable

from pydantic import BaseModel


@runtime_checkable
class Closeable(Protocol):
    """Anything holding a resource released by close()."""

    def close(self) -> None:
        ...


class BaseCloseable(BaseModel):
    """Model that closes every Closeable field when it is closed.

    The cascade runs State -> Config -> Logger -> Sink, so a single
    `with` block around the CLI releases log files and exporters.
    A failing child does not stop the remaining children from closing.
    """

    def close(self):
        for field_name in self.__class__.model_fields:
            child = getattr(self, field_name, None)
            if child is None or not isinstance(child, Closeable):
                continue
            try:
                child.close()
            except Exception as e:
                print(
                    f"Warning: Error closing {field_name}: {e}",
                    file=sys.stderr,
                )

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):  # noqa: U100
        self.close()
        return False


class BaseConfig(BaseCloseable):
    """Marker base for configuration sections (YAML/env/CLI)."""


class BaseState(BaseCloseable):
    """Marker base for runtime sections mutated during a run."""


__all__ = ["Closeable", "BaseCloseable", "BaseConfig", "BaseState"]
