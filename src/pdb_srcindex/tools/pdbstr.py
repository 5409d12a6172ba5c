"""Wrapper around pdbstr.exe, the stream reader/writer for PDB files."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pdb_srcindex.tools.base import CommandResult, CommandRunner, SubprocessRunner

PDBSTR_EXE_NAME = "pdbstr.exe"
SRCSRV_STREAM_NAME = "srcsrv"


class PdbStrCommand(Enum):
    """Commands understood by pdbstr.exe."""

    READ = "-r"
    WRITE = "-w"


class PdbStrExe:
    """Runs pdbstr.exe from a srcsrv tools directory."""

    def __init__(
        self,
        srcsrv_home: Path,
        runner: CommandRunner | None = None,
        timeout: float | None = None,
    ) -> None:
        self._executable = srcsrv_home / PDBSTR_EXE_NAME
        self._runner = runner or SubprocessRunner()
        self._timeout = timeout

    def build_command(
        self,
        command: PdbStrCommand,
        symbols_file: Path,
        stream_file: Path | None,
        stream_name: str,
    ) -> list[str]:
        """Return the argument list for one pdbstr invocation."""
        args = [str(self._executable), command.value, f"-p:{symbols_file}"]
        if stream_file is not None:
            args.append(f"-i:{stream_file}")
        args.append(f"-s:{stream_name}")
        return args

    def do_command(
        self,
        command: PdbStrCommand,
        symbols_file: Path,
        stream_file: Path,
        stream_name: str = SRCSRV_STREAM_NAME,
    ) -> CommandResult:
        """Run ``command`` against ``symbols_file`` using ``stream_file`` as input."""
        args = self.build_command(command, symbols_file, stream_file, stream_name)
        return self._runner.run(args, timeout=self._timeout)

    def read_stream(self, symbols_file: Path, stream_name: str = SRCSRV_STREAM_NAME) -> str:
        """Return the content of a named stream, raising OSError on failure."""
        args = self.build_command(PdbStrCommand.READ, symbols_file, None, stream_name)
        result = self._runner.run(args, timeout=self._timeout)
        if not result.ok:
            raise OSError(
                f"Failed to read stream '{stream_name}' from {symbols_file}: "
                f"{result.stderr.strip()}"
            )
        return result.stdout
