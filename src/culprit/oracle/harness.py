"""Oracle backed by the external test harness."""

from __future__ import annotations

from pathlib import Path

from culprit.core.config import Config
from culprit.core.errors import OracleInvocationError
from culprit.core.log import logger
from culprit.core.runner import Runner
from culprit.harness.commands import render_command
from culprit.harness.filter import build_filter, write_runsettings
from culprit.oracle.base import Verdict
from culprit.oracle.classify import BatchOutcome, classify, compile_signatures

# Shell exit statuses for "not executable" and "not found"
_NOT_RUNNABLE = (126, 127)


class HarnessOracle:
    """Runs a subset of tests as one filtered batch and classifies it.

    Each batch's filter (as a .runsettings file) and output are
    written to `workdir` and removed before evaluate() returns.
    """

    def __init__(
        self,
        config: Config,
        artifact: Path,
        workdir: Path,
        runner: Runner | None = None,
    ):
        self.config = config
        self.artifact = artifact
        self.workdir = workdir
        self.runner = runner or Runner()
        self.signatures = compile_signatures(config.oracle.signatures)
        self.calls = 0
        self.last_outcome: BatchOutcome | None = None
        self._warned_untimed = False

    @property
    def timeout(self) -> int | None:
        return self.config.oracle.timeout or None

    def command_for(self, subset: list[str], settings_file: Path) -> str:
        """Write the subset's filter to settings_file and render the
        run command that selects it."""
        harness = self.config.harness
        filter_expr = build_filter(subset, harness.filter_property)
        write_runsettings(settings_file, filter_expr)
        return render_command(
            harness.run_command,
            harness,
            artifact=self.artifact,
            filter=filter_expr,
            settings=settings_file,
        )

    def evaluate(self, subset: list[str]) -> Verdict:
        """Run `subset` and report whether the failure reproduced.

        Raises:
            OracleInvocationError: If the harness could not be
                started or the shell could not run it
        """
        if not subset:
            self.last_outcome = BatchOutcome.EMPTY
            return Verdict.INCONCLUSIVE

        if self.timeout is None and not self._warned_untimed:
            logger.warn(
                "No oracle timeout configured; batches run untimed and "
                "a hanging test host will block the run"
            )
            self._warned_untimed = True

        self.calls += 1
        output_file = self.workdir / f"batch-{self.calls:04d}.log"
        settings_file = self.workdir / f"batch-{self.calls:04d}.runsettings"
        try:
            command = self.command_for(subset, settings_file)
            with logger.span(
                f"Batch {self.calls}: {len(subset)} tests",
                tests=len(subset),
            ):
                try:
                    result = self.runner.execute(
                        command,
                        timeout=self.timeout,
                        log_file=output_file,
                    )
                except OSError as e:
                    raise OracleInvocationError(
                        f"Could not start test harness for "
                        f"{len(subset)} tests: {e}"
                    ) from e

            if result.returncode in _NOT_RUNNABLE:
                raise OracleInvocationError(
                    f"Could not run test harness "
                    f"'{self.config.harness.binary}' "
                    f"(exit {result.returncode}): "
                    f"{result.tail(3)}"
                )

            outcome = classify(result, self.signatures)
            self.last_outcome = outcome
        finally:
            output_file.unlink(missing_ok=True)
            settings_file.unlink(missing_ok=True)

        if outcome is BatchOutcome.OTHER_FAILURE:
            logger.warn(
                "Batch failed without the target signature "
                "(exit {returncode}); last output:\n{tail}",
                returncode=result.returncode,
                tail=result.tail(self.config.oracle.tail_lines),
            )
        elif outcome is BatchOutcome.TIMEOUT:
            logger.info(
                f"Batch timed out after {self.timeout}s; "
                f"counting it as reproducing"
            )
        else:
            logger.debug(f"Batch outcome: {outcome.value}")

        return outcome.verdict
