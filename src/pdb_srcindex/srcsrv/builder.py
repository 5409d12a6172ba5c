"""Writes the srcsrv stream that maps PDB source paths to download URLs."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from pdb_srcindex.srcsrv.urls import FileUrlProvider

LOG = logging.getLogger(__name__)

LINE_END = "\r\n"


class SrcSrvStreamBuilder:
    """Builds an HTTP srcsrv stream for a set of source files."""

    def __init__(self, url_provider: FileUrlProvider) -> None:
        self._url_provider = url_provider

    def header_lines(self) -> list[str]:
        return [
            "SRCSRV: ini ------------------------------------------------",
            "VERSION=3",
            "INDEXVERSION=2",
            "VERCTRL=http",
            "SRCSRV: variables ------------------------------------------",
            "SRCSRVVERCTRL=http",
            f"HTTP_ALIAS={self._url_provider.http_alias}",
            "HTTP_EXTRACT_TARGET=%HTTP_ALIAS%/%var2%",
            "SRCSRVTRG=%HTTP_EXTRACT_TARGET%",
            "SRCSRVCMD=",
            "SRCSRV: source files ---------------------------------------",
        ]

    def dump_stream_to_file(self, target_file: Path, source_files: Iterable[Path]) -> int:
        """Write the stream to ``target_file``; return the number of indexed files."""
        entries: list[str] = []
        for source_file in sorted(source_files, key=str):
            url = self._url_provider.get_file_url(source_file)
            if url is None:
                LOG.debug("Skipping source file without local copy: %s", source_file)
                continue
            entries.append(f"{source_file}*{url}")

        lines = [*self.header_lines(), *entries]
        lines.append("SRCSRV: end ------------------------------------------------")
        with target_file.open("w", encoding="utf-8", newline="") as handle:
            for line in lines:
                handle.write(line)
                handle.write(LINE_END)
        return len(entries)
