from __future__ import annotations

import os
from pathlib import Path

import pytest

from utils.file_utils import FileUtils, FileWriteError


def test_resolve_path_expands_user_and_variables(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("TYPEPAD_SUB", "data")

    resolved: Path = FileUtils.resolve_path("~/$TYPEPAD_SUB")

    assert resolved == (tmp_path / "data").resolve()


def test_resolve_path_makes_relative_paths_absolute(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)

    assert FileUtils.resolve_path("notes.txt") == tmp_path.resolve() / "notes.txt"


def test_resolve_path_strict_raises_for_missing(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        FileUtils.resolve_path(tmp_path / "missing", strict=True)


def test_write_atomic_creates_parents_and_writes(tmp_path: Path) -> None:
    target: Path = tmp_path / "a" / "b" / "file.bin"

    assert FileUtils.write_atomic(target, b"payload") is True
    assert target.read_bytes() == b"payload"


def test_write_atomic_identical_content_is_noop(tmp_path: Path) -> None:
    target: Path = tmp_path / "file.bin"
    FileUtils.write_atomic(target, b"payload")

    assert FileUtils.write_atomic(target, b"payload") is False
    assert FileUtils.write_atomic(target, b"changed") is True
    assert target.read_bytes() == b"changed"


def test_write_atomic_failure_leaves_no_temporary_file(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    target: Path = tmp_path / "file.bin"

    def failing_replace(_src: str, _dst: Path) -> None:
        msg = "disk full"
        raise OSError(msg)

    monkeypatch.setattr(os, "replace", failing_replace)

    with pytest.raises(FileWriteError, match="Could not write file"):
        FileUtils.write_atomic(target, b"payload")

    assert list(tmp_path.iterdir()) == []


def test_has_same_content(tmp_path: Path) -> None:
    target: Path = tmp_path / "file.bin"
    target.write_bytes(b"abc")

    assert FileUtils.has_same_content(target, b"abc") is True
    assert FileUtils.has_same_content(target, b"abd") is False
    assert FileUtils.has_same_content(tmp_path / "missing", b"abc") is False
    assert FileUtils.has_same_content(tmp_path, b"abc") is False
