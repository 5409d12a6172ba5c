"""Resolve source file references relative to the checkout root."""

from __future__ import annotations

import re
from pathlib import Path, PureWindowsPath
from typing import Final

WINDOWS_ABSOLUTE_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[a-zA-Z]:[\\/]")


def is_windows_absolute(candidate: str) -> bool:
    """Return True for drive-letter paths such as ``C:\\src\\a.cpp``."""
    return WINDOWS_ABSOLUTE_PATTERN.match(candidate) is not None


def relative_source_path(source_root: Path, candidate: Path | str) -> str | None:
    """Return the POSIX path of ``candidate`` relative to ``source_root``.

    Returns None when the candidate resolves outside the root. Drive-letter
    paths are compared case-insensitively, the way Windows resolves them.
    """
    raw = str(candidate)
    if is_windows_absolute(raw) and not is_windows_absolute(str(source_root)):
        return None
    if is_windows_absolute(raw):
        root_win = PureWindowsPath(str(source_root))
        candidate_win = PureWindowsPath(raw)
        if not candidate_win.is_relative_to(root_win):
            return None
        parts = candidate_win.relative_to(root_win).parts
        if any(part == ".." for part in parts):
            return None
        return "/".join(parts) or None

    root = source_root.resolve()
    normalized = raw.replace("\\", "/")
    resolved = Path(normalized)
    if not resolved.is_absolute():
        resolved = root / resolved
    resolved = resolved.resolve(strict=False)
    if not resolved.is_relative_to(root) or resolved == root:
        return None
    return resolved.relative_to(root).as_posix()
