from __future__ import annotations

import io
import json
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from pdb_srcindex.cli import main
from pdb_srcindex.tools import CommandResult


@dataclass(slots=True)
class FakeToolchain:
    """Emulates JetSymbols.exe dumpSources and pdbstr.exe -w/-r."""

    sources: list[str]
    write_exit_code: int = 0
    write_stderr: str = ""
    streams: dict[str, str] = field(default_factory=dict)
    calls: list[list[str]] = field(default_factory=list)

    def run(self, args: Sequence[str], timeout: float | None = None) -> CommandResult:
        _ = timeout
        command = list(args)
        self.calls.append(command)
        executable = Path(command[0]).name
        if executable == "JetSymbols.exe":
            Path(command[2].removeprefix("/o=")).write_text(
                "\n".join(self.sources), encoding="utf-8"
            )
            return CommandResult(exit_code=0, stdout="", stderr="")
        symbols_file = command[2].removeprefix("-p:")
        if command[1] == "-w":
            if self.write_exit_code != 0:
                return CommandResult(
                    exit_code=self.write_exit_code, stdout="", stderr=self.write_stderr
                )
            stream_file = Path(command[3].removeprefix("-i:"))
            self.streams[symbols_file] = stream_file.read_bytes().decode("utf-8")
            return CommandResult(exit_code=0, stdout="", stderr="")
        if symbols_file not in self.streams:
            return CommandResult(exit_code=1, stdout="", stderr="stream not found")
        return CommandResult(exit_code=0, stdout=self.streams[symbols_file], stderr="")


def _project(tmp_path: Path) -> tuple[Path, Path, Path]:
    project = tmp_path / "project"
    sources = project / "src"
    sources.mkdir(parents=True)
    (sources / "a.cpp").write_text("int a;", encoding="utf-8")
    (sources / "b.cpp").write_text("int b;", encoding="utf-8")
    symbols_file = project / "bin" / "app.pdb"
    symbols_file.parent.mkdir()
    symbols_file.write_bytes(b"pdb")
    return project, sources, symbols_file


def _base_args(project: Path) -> list[str]:
    return ["--project-root", str(project), "--timeout-seconds", "30"]


def test_patch_command_writes_stream_and_audit(tmp_path: Path) -> None:
    project, sources, symbols_file = _project(tmp_path)
    toolchain = FakeToolchain(sources=[str(sources / "a.cpp"), str(sources / "b.cpp")])
    out = io.StringIO()

    exit_code = main(
        [
            *_base_args(project),
            "patch",
            str(symbols_file),
            "--server-url",
            "https://ci.example.com",
            "--build-id",
            "42",
            "--source-root",
            str(sources),
        ],
        runner=toolchain,
        out_stream=out,
    )

    assert exit_code == 0
    lines = out.getvalue().splitlines()
    assert "Information about 2 source files will be updated." in lines
    assert lines[-1] == "Patched: 1, skipped: 0, failed: 0"

    stream = toolchain.streams[str(symbols_file.resolve())]
    assert "HTTP_ALIAS=https://ci.example.com/app/sources/builds/id-42/sources\r\n" in stream
    assert f"{sources / 'a.cpp'}*a.cpp\r\n" in stream
    assert f"{sources / 'b.cpp'}*b.cpp\r\n" in stream

    work_dir = project.resolve() / ".pdb_srcindex" / "tmp"
    assert list(work_dir.iterdir()) == []
    audit_lines = (project / ".pdb_srcindex" / "audit.jsonl").read_text(encoding="utf-8")
    event = json.loads(audit_lines.splitlines()[-1])
    assert event["status"] == "patched"
    assert event["metadata"] == {"source_file_count": 2}

    show_out = io.StringIO()
    assert main([*_base_args(project), "show", str(symbols_file)], toolchain, show_out) == 0
    assert show_out.getvalue().startswith("SRCSRV: ini")


def test_sources_missing_locally_are_skipped(tmp_path: Path) -> None:
    project, _, symbols_file = _project(tmp_path)
    toolchain = FakeToolchain(sources=["C:\\src\\a.cpp", "C:\\src\\b.cpp"])
    out = io.StringIO()

    exit_code = main(
        [*_base_args(project), "patch", str(symbols_file), "--no-audit"],
        runner=toolchain,
        out_stream=out,
    )

    assert exit_code == 0
    text = out.getvalue()
    assert "not produced during the current build" in text
    assert "Patched: 0, skipped: 1, failed: 0" in text
    assert not any(call[1] == "-w" for call in toolchain.calls)
    assert not (project / ".pdb_srcindex" / "audit.jsonl").exists()


def test_tool_failure_sets_exit_code(tmp_path: Path) -> None:
    project, sources, symbols_file = _project(tmp_path)
    toolchain = FakeToolchain(
        sources=[str(sources / "a.cpp")], write_exit_code=1, write_stderr="pdb is read-only"
    )
    out = io.StringIO()

    exit_code = main(
        [*_base_args(project), "patch", str(symbols_file), "--source-root", str(sources)],
        runner=toolchain,
        out_stream=out,
    )

    assert exit_code == 1
    text = out.getvalue()
    assert "WARNING: Failed to update symbols file" in text
    assert "pdb is read-only" in text
    assert "Patched: 0, skipped: 0, failed: 1" in text
    assert f"{symbols_file.resolve()}: TOOL_FAILURE" in text


def test_show_without_stream_fails(tmp_path: Path) -> None:
    project, _, symbols_file = _project(tmp_path)
    out = io.StringIO()

    exit_code = main(
        [*_base_args(project), "show", str(symbols_file)],
        runner=FakeToolchain(sources=[]),
        out_stream=out,
    )

    assert exit_code == 1
    assert "stream not found" in out.getvalue()
