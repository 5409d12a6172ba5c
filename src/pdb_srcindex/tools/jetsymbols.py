"""Source reference extraction via the JetSymbols dumpSources command."""

from __future__ import annotations

import logging
from pathlib import Path

from pdb_srcindex.logging import BuildProgressLogger
from pdb_srcindex.tools.base import CommandRunner, SubprocessRunner
from pdb_srcindex.workfile import ScopedWorkFile

LOG = logging.getLogger(__name__)

DUMP_SOURCES_COMMAND = "dumpSources"


class ExtractionError(Exception):
    """Raised when source references cannot be read from a symbol file."""

    def __init__(self, symbols_file: Path, stderr: str) -> None:
        super().__init__(f"Failed to dump sources from {symbols_file}: {stderr.strip()}")
        self.symbols_file = symbols_file
        self.stderr = stderr


class JetSymbolsExe:
    """Lists the source files recorded in a PDB file."""

    def __init__(
        self,
        executable: Path,
        working_dir: Path,
        runner: CommandRunner | None = None,
        timeout: float | None = None,
    ) -> None:
        self._executable = executable
        self._working_dir = working_dir
        self._runner = runner or SubprocessRunner()
        self._timeout = timeout

    def get_referenced_source_files(
        self, symbols_file: Path, build_logger: BuildProgressLogger
    ) -> set[Path]:
        """Return absolute source paths referenced by ``symbols_file``."""
        with ScopedWorkFile(self._working_dir, prefix="sources-", suffix=".txt") as output:
            args = [
                str(self._executable),
                DUMP_SOURCES_COMMAND,
                f"/o={output}",
                str(symbols_file),
            ]
            result = self._runner.run(args, timeout=self._timeout)
            if not result.ok:
                message = (
                    f"Failed to dump sources from symbols file {symbols_file}: "
                    f"{result.stderr.strip()}"
                )
                build_logger.warning(message)
                raise ExtractionError(symbols_file, result.stderr)
            lines = output.read_text(encoding="utf-8", errors="replace").splitlines()

        sources = {Path(line.strip()) for line in lines if line.strip()}
        LOG.debug("Found %d source references in %s", len(sources), symbols_file)
        return sources
