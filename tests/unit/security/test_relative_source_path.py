from __future__ import annotations

from pathlib import Path

from pdb_srcindex.security import relative_source_path
from pdb_srcindex.security.paths import is_windows_absolute


def test_path_under_root_is_relative_posix(tmp_path: Path) -> None:
    assert relative_source_path(tmp_path, tmp_path / "src" / "main.cpp") == "src/main.cpp"


def test_path_outside_root_is_rejected(tmp_path: Path) -> None:
    root = tmp_path / "checkout"
    root.mkdir()

    assert relative_source_path(root, tmp_path / "other" / "main.cpp") is None


def test_traversal_out_of_root_is_rejected(tmp_path: Path) -> None:
    root = tmp_path / "checkout"
    root.mkdir()

    assert relative_source_path(root, root / ".." / "secret.cpp") is None


def test_root_itself_has_no_relative_path(tmp_path: Path) -> None:
    assert relative_source_path(tmp_path, tmp_path) is None


def test_windows_paths_compare_case_insensitively() -> None:
    assert relative_source_path(Path("C:\\src"), "c:\\SRC\\lib\\a.cpp") == "lib/a.cpp"
    assert relative_source_path(Path("C:\\src"), "D:\\src\\a.cpp") is None
    assert relative_source_path(Path("C:\\src"), "C:\\src\\..\\a.cpp") is None


def test_windows_path_against_posix_root_is_rejected(tmp_path: Path) -> None:
    assert relative_source_path(tmp_path, "C:\\src\\a.cpp") is None


def test_windows_absolute_detection() -> None:
    assert is_windows_absolute("C:\\src\\a.cpp")
    assert is_windows_absolute("c:/src/a.cpp")
    assert not is_windows_absolute("/src/a.cpp")
    assert not is_windows_absolute("src\\a.cpp")


def test_windows_root_with_different_case_matches() -> None:
    assert relative_source_path(Path("c:\\src"), "C:\\Src\\a.cpp") == "a.cpp"
