"""Map local source files to retrieval URLs on the build server."""

from __future__ import annotations

from pathlib import Path

from pdb_srcindex.security import relative_source_path


class FileUrlProvider:
    """Resolves source files under a checkout root to server-relative URLs."""

    def __init__(self, server_url: str, build_id: str, source_root: Path) -> None:
        self._server_url = server_url.rstrip("/")
        self._build_id = build_id
        self._source_root = source_root

    @property
    def http_alias(self) -> str:
        """Base URL that serves the sources of this build."""
        return f"{self._server_url}/app/sources/builds/id-{self._build_id}/sources"

    def get_file_url(self, path: Path | str) -> str | None:
        """Return the URL suffix for an existing file under the source root."""
        candidate = Path(path)
        if not candidate.is_file():
            return None
        return relative_source_path(self._source_root, candidate)
