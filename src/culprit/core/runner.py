"""Command execution using invoke."""

from __future__ import annotations

import contextlib
import os
import signal
import time
from pathlib import Path

from invoke import Config, Context
from invoke.exceptions import CommandTimedOut
from invoke.runners import Local

from culprit.core.log import logger
from culprit.core.result import BatchResult


class GroupKillingLocal(Local):
    """Local runner that kills the command's whole process group.

    `dotnet test` hands the tests to a separate testhost process which
    inherits the output pipes. Killing only the shell would leave the
    testhost running and holding the pipes open, so the command runs
    in a new session and a timeout kills every process in it.
    """

    def start(self, command: str, shell: str, env: dict) -> None:
        if self.using_pty or not hasattr(os, "killpg"):
            # pty.fork() already makes the child a session leader
            return super().start(command, shell, env)
        from subprocess import PIPE, Popen

        self.process = Popen(
            command,
            shell=True,
            executable=shell,
            env=env,
            stdout=PIPE,
            stderr=PIPE,
            stdin=PIPE,
            start_new_session=True,
        )

    def kill(self) -> None:
        if not hasattr(os, "killpg"):
            return super().kill()
        pid = self.pid if self.using_pty else self.process.pid
        # The group may already be gone when the timer fires
        with contextlib.suppress(ProcessLookupError):
            os.killpg(pid, signal.SIGKILL)


class Runner(Context):
    """invoke.Context with a single execute() entry point.

    Output is always captured, never echoed; it goes to the logger at
    spew level and optionally to a file.
    """

    def __init__(self):
        super().__init__(
            config=Config(overrides={"runners": {"local": GroupKillingLocal}})
        )

    def execute(
        self,
        command: str,
        cwd: Path | None = None,
        timeout: int | None = None,
        log_file: Path | None = None,
    ) -> BatchResult:
        """Run a shell command and capture its combined output.

        Args:
            command: Shell command line
            cwd: Working directory, current directory when None
            timeout: Seconds before the command and every process it
                started are killed; None or 0 runs untimed
            log_file: Where to write combined stdout/stderr

        Returns:
            BatchResult; a timed-out command has timed_out=True and
            whatever output was captured before the kill
        """
        kwargs = {
            "hide": True,
            "warn": True,
            "in_stream": False,
        }
        if timeout:
            kwargs["timeout"] = timeout

        logger.trace("Executing command", command=command)
        started = time.monotonic()
        timed_out = False
        try:
            if cwd:
                with self.cd(str(cwd)):
                    result = self.run(command, **kwargs)
            else:
                result = self.run(command, **kwargs)
        except CommandTimedOut as e:
            result = e.result
            timed_out = True

        output = (result.stdout or "") + (result.stderr or "")
        batch = BatchResult(
            command=command,
            returncode=-1 if timed_out else result.exited,
            output=output,
            timed_out=timed_out,
            duration=time.monotonic() - started,
        )

        if log_file:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            log_file.write_text(output, encoding="utf-8")

        for line in output.splitlines():
            logger.spew("{line}", line=line.rstrip())

        return batch
