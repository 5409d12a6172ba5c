"""Build progress sinks and structured audit logging."""

from .audit import JsonlAuditLogger, PatchEvent, utc_timestamp
from .progress import BuildProgressLogger, RecordingProgressLogger, StreamProgressLogger

__all__ = [
    "BuildProgressLogger",
    "JsonlAuditLogger",
    "PatchEvent",
    "RecordingProgressLogger",
    "StreamProgressLogger",
    "utc_timestamp",
]
