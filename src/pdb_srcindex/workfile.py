"""Scoped temporary files placed in the patcher working directory."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from types import TracebackType

LOG = logging.getLogger(__name__)


class WorkFileError(Exception):
    """Raised when a work file cannot be created or removed."""

    def __init__(self, reason: str, path: Path | None = None) -> None:
        super().__init__(reason)
        self.reason = reason
        self.path = path


class ScopedWorkFile:
    """Empty, uniquely named file that is deleted when the scope exits.

    Deletion happens on every exit path. A deletion failure is logged and
    raised as WorkFileError only when no other exception is already
    propagating out of the scope.
    """

    def __init__(self, directory: Path, prefix: str, suffix: str) -> None:
        self._directory = directory
        self._prefix = prefix
        self._suffix = suffix
        self._path: Path | None = None

    @property
    def path(self) -> Path:
        """Return the work file path; only valid inside the scope."""
        if self._path is None:
            raise RuntimeError("Work file is not acquired.")
        return self._path

    def __enter__(self) -> Path:
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            handle, name = tempfile.mkstemp(
                prefix=self._prefix, suffix=self._suffix, dir=self._directory
            )
            os.close(handle)
        except OSError as error:
            raise WorkFileError(
                f"Failed to create work file in {self._directory}: {error}"
            ) from error
        self._path = Path(name)
        LOG.debug("Created work file %s", self._path)
        return self._path

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        path = self._path
        self._path = None
        if path is None:
            return
        try:
            path.unlink(missing_ok=True)
        except OSError as error:
            LOG.warning("Failed to delete work file %s: %s", path, error)
            if exc_type is None:
                raise WorkFileError(f"Failed to delete work file {path}: {error}", path) from error
            return
        LOG.debug("Deleted work file %s", path)
