"""Build progress sinks used to report patching to the build log."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, TextIO

WARNING_PREFIX = "WARNING: "


class BuildProgressLogger(Protocol):
    """Fire-and-forget sink for user-visible build messages."""

    def message(self, text: str) -> None:
        """Report an informational message."""

    def warning(self, text: str) -> None:
        """Report a warning."""


class StreamProgressLogger:
    """Writes build messages as lines to a text stream."""

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream

    def message(self, text: str) -> None:
        self._write(text)

    def warning(self, text: str) -> None:
        self._write(f"{WARNING_PREFIX}{text}")

    def _write(self, line: str) -> None:
        self._stream.write(f"{line}\n")
        self._stream.flush()


@dataclass(slots=True)
class RecordingProgressLogger:
    """Collects build messages in memory as (level, text) pairs."""

    records: list[tuple[str, str]] = field(default_factory=list)

    def message(self, text: str) -> None:
        self.records.append(("message", text))

    def warning(self, text: str) -> None:
        self.records.append(("warning", text))

    def texts(self, level: str | None = None) -> list[str]:
        """Return recorded texts, optionally filtered by level."""
        return [text for record_level, text in self.records if level in (None, record_level)]
