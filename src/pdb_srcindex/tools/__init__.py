"""External tool wrappers."""

from .base import CommandResult, CommandRunner, CommandTimeoutError, SubprocessRunner
from .jetsymbols import ExtractionError, JetSymbolsExe
from .pdbstr import SRCSRV_STREAM_NAME, PdbStrCommand, PdbStrExe

__all__ = [
    "CommandResult",
    "CommandRunner",
    "CommandTimeoutError",
    "ExtractionError",
    "JetSymbolsExe",
    "PdbStrCommand",
    "PdbStrExe",
    "SRCSRV_STREAM_NAME",
    "SubprocessRunner",
]
