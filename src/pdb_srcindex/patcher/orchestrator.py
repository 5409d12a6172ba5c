"""Drives one symbol file through extraction, index build and stream write."""

from __future__ import annotations

import logging
from pathlib import Path

from pdb_srcindex.logging import BuildProgressLogger
from pdb_srcindex.patcher.models import (
    EXTRACTION_FAILURE,
    INDEX_BUILD_FAILURE,
    RESOURCE_FAILURE,
    SKIP_NO_LOCAL_FILES,
    SKIP_NO_SOURCE_INFO,
    TIMEOUT,
    TOOL_FAILURE,
    IndexStreamBuilder,
    PatchError,
    PatchOutcome,
    SourceExtractor,
    StreamWriter,
)
from pdb_srcindex.tools import (
    SRCSRV_STREAM_NAME,
    CommandTimeoutError,
    ExtractionError,
    PdbStrCommand,
)
from pdb_srcindex.workfile import ScopedWorkFile, WorkFileError

LOG = logging.getLogger(__name__)

WORK_FILE_PREFIX = "pdb-"
WORK_FILE_SUFFIX = ".patch"


class PdbFilePatcher:
    """Adds a srcsrv stream to PDB files."""

    def __init__(
        self,
        working_dir: Path,
        extractor: SourceExtractor,
        stream_builder: IndexStreamBuilder,
        stream_writer: StreamWriter,
    ) -> None:
        self._working_dir = working_dir
        self._extractor = extractor
        self._stream_builder = stream_builder
        self._stream_writer = stream_writer

    def patch(self, symbols_file: Path, build_logger: BuildProgressLogger) -> PatchOutcome:
        """Write the srcsrv stream into ``symbols_file``.

        Returns a skipped outcome when the file references no sources or none
        of them exist locally. Raises PatchError on any failure; the work file
        holding the stream never outlives this call.
        """
        symbols_path = symbols_file.resolve()
        try:
            return self._patch(symbols_path, build_logger)
        except WorkFileError as error:
            raise PatchError(RESOURCE_FAILURE, error.reason, symbols_path) from error
        except CommandTimeoutError as error:
            raise PatchError(TIMEOUT, str(error), symbols_path) from error

    def _patch(self, symbols_path: Path, build_logger: BuildProgressLogger) -> PatchOutcome:
        try:
            source_files = self._extractor.get_referenced_source_files(symbols_path, build_logger)
        except (ExtractionError, OSError) as error:
            raise PatchError(
                EXTRACTION_FAILURE,
                f"Failed to read source information from {symbols_path}: {error}",
                symbols_path,
                stderr=getattr(error, "stderr", None),
            ) from error

        if not source_files:
            message = f"No source information found in pdb file {symbols_path}"
            build_logger.warning(message)
            LOG.warning(message)
            return PatchOutcome.skipped(SKIP_NO_SOURCE_INFO)

        with ScopedWorkFile(self._working_dir, WORK_FILE_PREFIX, WORK_FILE_SUFFIX) as stream_file:
            try:
                processed = self._stream_builder.dump_stream_to_file(stream_file, source_files)
            except (OSError, ValueError) as error:
                raise PatchError(
                    INDEX_BUILD_FAILURE,
                    f"Failed to build srcsrv stream for {symbols_path}: {error}",
                    symbols_path,
                ) from error

            if processed == 0:
                build_logger.message(
                    f"No local source files were found for pdb file {symbols_path}. "
                    "Looks like it was not produced during the current build."
                )
                return PatchOutcome.skipped(SKIP_NO_LOCAL_FILES)
            build_logger.message(f"Information about {processed} source files will be updated.")

            try:
                result = self._stream_writer.do_command(
                    PdbStrCommand.WRITE, symbols_path, stream_file, SRCSRV_STREAM_NAME
                )
            except OSError as error:
                raise PatchError(
                    TOOL_FAILURE,
                    f"Failed to run stream writer for {symbols_path}: {error}",
                    symbols_path,
                ) from error
            if result.exit_code != 0:
                raise PatchError(
                    TOOL_FAILURE,
                    f"Failed to update symbols file {symbols_path}: {result.stderr}",
                    symbols_path,
                    stderr=result.stderr,
                )

        LOG.info("Patched %s with %d source files", symbols_path, processed)
        return PatchOutcome.patched(processed)
