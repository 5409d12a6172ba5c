"""Patch many symbol files, optionally across worker threads."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path

from pdb_srcindex.logging import BuildProgressLogger, JsonlAuditLogger, PatchEvent, utc_timestamp
from pdb_srcindex.patcher import PatchError, PatchOutcome, PdbFilePatcher

LOG = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class PatchResult:
    """Per-file batch result; exactly one of outcome or error_code is set."""

    symbols_file: Path
    outcome: PatchOutcome | None
    error_code: str | None = None
    error_message: str | None = None

    @property
    def failed(self) -> bool:
        return self.error_code is not None


def patch_symbol_files(
    patcher: PdbFilePatcher,
    symbols_files: Sequence[Path],
    build_logger: BuildProgressLogger,
    audit_logger: JsonlAuditLogger | None = None,
    max_workers: int = 1,
) -> list[PatchResult]:
    """Patch every file and return results in input order.

    A failure for one file is recorded in its result and does not stop the
    remaining files.
    """
    if max_workers < 1:
        raise ValueError("max_workers must be >= 1.")

    def run_one(symbols_file: Path) -> PatchResult:
        result = _patch_one(patcher, symbols_file, build_logger)
        if audit_logger is not None:
            try:
                audit_logger.append(_to_event(result))
            except OSError as error:
                LOG.error("Failed to write audit event to %s: %s", audit_logger.path, error)
        return result

    if max_workers == 1 or len(symbols_files) < 2:
        return [run_one(symbols_file) for symbols_file in symbols_files]
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        return list(executor.map(run_one, symbols_files))


def _patch_one(
    patcher: PdbFilePatcher, symbols_file: Path, build_logger: BuildProgressLogger
) -> PatchResult:
    try:
        outcome = patcher.patch(symbols_file, build_logger)
    except PatchError as error:
        LOG.error("Failed to patch %s: %s (%s)", error.symbols_file, error.message, error.code)
        build_logger.warning(error.message)
        return PatchResult(
            symbols_file=error.symbols_file,
            outcome=None,
            error_code=error.code,
            error_message=error.message,
        )
    return PatchResult(symbols_file=symbols_file.resolve(), outcome=outcome)


def _to_event(result: PatchResult) -> PatchEvent:
    if result.outcome is None:
        return PatchEvent(
            timestamp=utc_timestamp(),
            symbols_file=str(result.symbols_file),
            status="failed",
            reason=None,
            error_code=result.error_code,
            metadata={},
        )
    return PatchEvent(
        timestamp=utc_timestamp(),
        symbols_file=str(result.symbols_file),
        status=result.outcome.status,
        reason=result.outcome.reason,
        error_code=None,
        metadata={"source_file_count": result.outcome.source_file_count},
    )
