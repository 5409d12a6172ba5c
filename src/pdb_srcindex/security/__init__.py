"""Path containment helpers for source files."""

from .paths import relative_source_path

__all__ = ["relative_source_path"]
