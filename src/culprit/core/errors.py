"""Exception hierarchy for culprit.

Verdicts are never raised. Only conditions that make a bisection run
meaningless abort it.
"""


class CulpritError(Exception):
    """Base class for errors that abort a run with exit code 1."""


class SetupError(CulpritError):
    """The run cannot start: missing artifact, failed discovery,
    no tests, or an initial set that does not reproduce."""


class OracleInvocationError(CulpritError):
    """The test harness itself could not be executed."""


__all__ = ["CulpritError", "SetupError", "OracleInvocationError"]
