from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from pdb_srcindex.logging import RecordingProgressLogger
from pdb_srcindex.tools import CommandResult, ExtractionError, JetSymbolsExe


@dataclass(slots=True)
class DumpSourcesRunner:
    lines: list[str]
    exit_code: int = 0
    stderr: str = ""
    calls: list[list[str]] = field(default_factory=list)

    def run(self, args: Sequence[str], timeout: float | None = None) -> CommandResult:
        _ = timeout
        self.calls.append(list(args))
        output = Path(args[2].removeprefix("/o="))
        assert output.exists()
        if self.exit_code == 0:
            output.write_text("\n".join(self.lines), encoding="utf-8")
        return CommandResult(exit_code=self.exit_code, stdout="", stderr=self.stderr)


def test_dump_sources_lines_become_paths(tmp_path: Path) -> None:
    work_dir = tmp_path / "work"
    runner = DumpSourcesRunner(lines=["C:\\src\\a.cpp", "", "  C:\\src\\b.cpp  ", "C:\\src\\a.cpp"])
    extractor = JetSymbolsExe(tmp_path / "JetSymbols.exe", work_dir, runner=runner)

    sources = extractor.get_referenced_source_files(tmp_path / "app.pdb", RecordingProgressLogger())

    assert sources == {Path("C:\\src\\a.cpp"), Path("C:\\src\\b.cpp")}
    assert runner.calls[0][0] == str(tmp_path / "JetSymbols.exe")
    assert runner.calls[0][1] == "dumpSources"
    assert runner.calls[0][3] == str(tmp_path / "app.pdb")
    assert list(work_dir.iterdir()) == []


def test_empty_dump_returns_empty_set(tmp_path: Path) -> None:
    extractor = JetSymbolsExe(tmp_path / "JetSymbols.exe", tmp_path, runner=DumpSourcesRunner([]))

    sources = extractor.get_referenced_source_files(tmp_path / "a.pdb", RecordingProgressLogger())

    assert sources == set()


def test_failed_dump_warns_and_raises(tmp_path: Path) -> None:
    work_dir = tmp_path / "work"
    runner = DumpSourcesRunner(lines=[], exit_code=3, stderr="cannot open pdb")
    extractor = JetSymbolsExe(tmp_path / "JetSymbols.exe", work_dir, runner=runner)
    logger = RecordingProgressLogger()

    with pytest.raises(ExtractionError) as error:
        extractor.get_referenced_source_files(tmp_path / "app.pdb", logger)

    assert error.value.stderr == "cannot open pdb"
    assert len(logger.texts("warning")) == 1
    assert "cannot open pdb" in logger.texts("warning")[0]
    assert list(work_dir.iterdir()) == []
