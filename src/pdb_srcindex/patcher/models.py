"""Patch outcomes, errors, and the collaborator protocols."""

from __future__ import annotations

from collections.abc import Collection
from dataclasses import dataclass
from pathlib import Path
from typing import Final, Protocol

from pdb_srcindex.logging import BuildProgressLogger
from pdb_srcindex.tools import CommandResult, PdbStrCommand

STATUS_PATCHED: Final = "patched"
STATUS_SKIPPED: Final = "skipped"

SKIP_NO_SOURCE_INFO: Final = "no-source-info"
SKIP_NO_LOCAL_FILES: Final = "no-local-files"

EXTRACTION_FAILURE: Final = "EXTRACTION_FAILURE"
INDEX_BUILD_FAILURE: Final = "INDEX_BUILD_FAILURE"
TOOL_FAILURE: Final = "TOOL_FAILURE"
TIMEOUT: Final = "TIMEOUT"
RESOURCE_FAILURE: Final = "RESOURCE_FAILURE"


@dataclass(slots=True, frozen=True)
class PatchOutcome:
    """Result of a patch attempt that did not fail."""

    status: str
    reason: str | None = None
    source_file_count: int = 0

    @classmethod
    def patched(cls, source_file_count: int) -> PatchOutcome:
        return cls(status=STATUS_PATCHED, source_file_count=source_file_count)

    @classmethod
    def skipped(cls, reason: str) -> PatchOutcome:
        return cls(status=STATUS_SKIPPED, reason=reason)

    @property
    def is_patched(self) -> bool:
        return self.status == STATUS_PATCHED


class PatchError(Exception):
    """Raised when a symbol file cannot be patched."""

    def __init__(
        self,
        code: str,
        message: str,
        symbols_file: Path,
        stderr: str | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.symbols_file = symbols_file
        self.stderr = stderr


class SourceExtractor(Protocol):
    """Lists the source files a symbol file references."""

    def get_referenced_source_files(
        self, symbols_file: Path, build_logger: BuildProgressLogger
    ) -> Collection[Path]:
        """Return absolute source paths, possibly empty."""


class IndexStreamBuilder(Protocol):
    """Writes a retrieval index for a set of source files."""

    def dump_stream_to_file(self, target_file: Path, source_files: Collection[Path]) -> int:
        """Return the number of sources that resolved to local files."""


class StreamWriter(Protocol):
    """Injects a named stream into a symbol file."""

    def do_command(
        self,
        command: PdbStrCommand,
        symbols_file: Path,
        stream_file: Path,
        stream_name: str,
    ) -> CommandResult:
        """Run the stream command and report the tool's exit status."""
