"""Command line entrypoint for source indexing of PDB files."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import TextIO

from pdb_srcindex.batch import PatchResult, patch_symbol_files
from pdb_srcindex.config import CliOverrides, PatcherConfig, load_effective_config
from pdb_srcindex.logging import JsonlAuditLogger, StreamProgressLogger
from pdb_srcindex.patcher import PdbFilePatcher
from pdb_srcindex.srcsrv import FileUrlProvider, SrcSrvStreamBuilder
from pdb_srcindex.tools import (
    SRCSRV_STREAM_NAME,
    CommandRunner,
    CommandTimeoutError,
    JetSymbolsExe,
    PdbStrExe,
    SubprocessRunner,
)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for the patch and show commands."""
    parser = argparse.ArgumentParser(prog="pdb-srcindex")
    parser.add_argument("--project-root", required=False, default=".")
    parser.add_argument("--working-dir", required=False, default=None)
    parser.add_argument("--srcsrv-home", required=False, default=None)
    parser.add_argument("--jetsymbols-path", required=False, default=None)
    parser.add_argument("--timeout-seconds", type=int, required=False, default=None)
    parser.add_argument("--log-level", choices=LOG_LEVELS, required=False, default="WARNING")
    commands = parser.add_subparsers(dest="command", required=True)

    patch = commands.add_parser("patch", help="Write the srcsrv stream into PDB files.")
    patch.add_argument("symbols_files", nargs="+")
    patch.add_argument("--server-url", required=False, default=None)
    patch.add_argument("--build-id", required=False, default=None)
    patch.add_argument("--source-root", required=False, default=None)
    patch.add_argument("--jobs", type=int, required=False, default=1)
    patch.add_argument("--no-audit", action="store_true")

    show = commands.add_parser("show", help="Print the srcsrv stream of a PDB file.")
    show.add_argument("symbols_file")
    return parser


def create_patcher(config: PatcherConfig, runner: CommandRunner | None = None) -> PdbFilePatcher:
    """Wire a PdbFilePatcher from effective configuration."""
    command_runner = runner or SubprocessRunner()
    timeout = float(config.tools.timeout_seconds)
    url_provider = FileUrlProvider(
        server_url=config.index.server_url,
        build_id=config.index.build_id,
        source_root=config.index.source_root,
    )
    return PdbFilePatcher(
        working_dir=config.working_dir,
        extractor=JetSymbolsExe(
            executable=config.tools.jetsymbols_path,
            working_dir=config.working_dir,
            runner=command_runner,
            timeout=timeout,
        ),
        stream_builder=SrcSrvStreamBuilder(url_provider),
        stream_writer=PdbStrExe(config.tools.srcsrv_home, runner=command_runner, timeout=timeout),
    )


def _optional_path(value: str | None) -> Path | None:
    return Path(value).resolve() if value is not None else None


def main(
    argv: Sequence[str] | None = None,
    runner: CommandRunner | None = None,
    out_stream: TextIO | None = None,
) -> int:
    """Entrypoint for the pdb-srcindex command."""
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    out = out_stream or sys.stdout

    overrides = CliOverrides(
        working_dir=_optional_path(args.working_dir),
        srcsrv_home=_optional_path(args.srcsrv_home),
        jetsymbols_path=_optional_path(args.jetsymbols_path),
        timeout_seconds=args.timeout_seconds,
        server_url=getattr(args, "server_url", None),
        build_id=getattr(args, "build_id", None),
        source_root=_optional_path(getattr(args, "source_root", None)),
    )
    try:
        config = load_effective_config(Path(args.project_root), overrides=overrides)
    except ValueError as error:
        parser.error(str(error))

    if args.command == "show":
        return _show(config, Path(args.symbols_file), runner, out)
    if args.jobs < 1:
        parser.error("--jobs must be a positive integer.")

    audit_logger = None if args.no_audit else JsonlAuditLogger(config.audit_log_path)
    results = patch_symbol_files(
        create_patcher(config, runner),
        [Path(item) for item in args.symbols_files],
        StreamProgressLogger(out),
        audit_logger=audit_logger,
        max_workers=args.jobs,
    )
    _print_summary(results, out)
    return 1 if any(result.failed for result in results) else 0


def _show(
    config: PatcherConfig, symbols_file: Path, runner: CommandRunner | None, out: TextIO
) -> int:
    pdbstr = PdbStrExe(
        config.tools.srcsrv_home,
        runner=runner or SubprocessRunner(),
        timeout=float(config.tools.timeout_seconds),
    )
    try:
        content = pdbstr.read_stream(symbols_file.resolve(), SRCSRV_STREAM_NAME)
    except (OSError, CommandTimeoutError) as error:
        out.write(f"{error}\n")
        return 1
    out.write(content)
    if content and not content.endswith("\n"):
        out.write("\n")
    return 0


def _print_summary(results: list[PatchResult], out: TextIO) -> None:
    patched = sum(
        1 for result in results if result.outcome is not None and result.outcome.is_patched
    )
    failed = sum(1 for result in results if result.failed)
    skipped = len(results) - patched - failed
    out.write(f"Patched: {patched}, skipped: {skipped}, failed: {failed}\n")
    for result in results:
        if result.failed:
            out.write(f"  {result.symbols_file}: {result.error_code}\n")


if __name__ == "__main__":
    raise SystemExit(main())
