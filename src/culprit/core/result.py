"""Value objects produced by command execution and bisection."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class BatchResult(BaseModel):
    """One harness invocation: exit status and captured output."""

    command: str
    returncode: int
    output: str = Field(default="", description="Combined stdout+stderr")
    timed_out: bool = False
    duration: float = Field(default=0.0, description="Wall time, seconds")

    @property
    def success(self) -> bool:
        return self.returncode == 0 and not self.timed_out

    def tail(self, lines: int) -> str:
        """Last `lines` lines of output."""
        if lines <= 0:
            return ""
        return "\n".join(self.output.splitlines()[-lines:])


class Outcome(str, Enum):
    """How a bisection run ended."""

    CONFIRMED = "confirmed"
    UNCONFIRMED = "unconfirmed"
    COMBINATION = "combination"


class BisectionResult(BaseModel):
    """Terminal result of a bisection run."""

    outcome: Outcome
    candidates: list[str]
    first_half: list[str] = Field(default_factory=list)
    second_half: list[str] = Field(default_factory=list)
    oracle_calls: int = 0

    @property
    def culprit(self) -> str | None:
        """The isolated test, when the run narrowed to one."""
        if self.outcome is Outcome.COMBINATION:
            return None
        return self.candidates[0]

    def describe(self) -> str:
        if self.outcome is Outcome.CONFIRMED:
            return f"Culprit confirmed: {self.culprit}"
        if self.outcome is Outcome.UNCONFIRMED:
            return (
                f"Single candidate {self.culprit} did not reproduce on "
                f"its own; the failure might depend on test order or "
                f"interaction"
            )
        return (
            f"Stopped at {len(self.candidates)} tests: neither half "
            f"reproduces alone, the failure may need both in combination"
        )


__all__ = ["BatchResult", "BisectionResult", "Outcome"]
