"""External process capability shared by tool wrappers."""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

LOG = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class CommandResult:
    """Exit status and captured output of one external process run."""

    exit_code: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


class CommandTimeoutError(Exception):
    """Raised when an external process does not finish in time."""

    def __init__(self, args: Sequence[str], timeout: float) -> None:
        super().__init__(f"Command timed out after {timeout:g}s: {' '.join(args)}")
        self.command = tuple(args)
        self.timeout = timeout


class CommandRunner(Protocol):
    """Runs an external command and reports its result."""

    def run(self, args: Sequence[str], timeout: float | None = None) -> CommandResult:
        """Run ``args`` and block until it exits or ``timeout`` elapses."""


class SubprocessRunner:
    """CommandRunner backed by subprocess.run."""

    def run(self, args: Sequence[str], timeout: float | None = None) -> CommandResult:
        command = [str(arg) for arg in args]
        LOG.debug("Running %s", command)
        try:
            completed = subprocess.run(
                command,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                check=False,
                timeout=timeout,
            )
        except subprocess.TimeoutExpired as error:
            LOG.error("Command timed out after %ss: %s", timeout, command)
            raise CommandTimeoutError(command, timeout or 0.0) from error
        if completed.returncode != 0:
            LOG.warning(
                "Command exited with code %d: %s: %s",
                completed.returncode,
                command,
                completed.stderr.strip(),
            )
        return CommandResult(
            exit_code=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )
