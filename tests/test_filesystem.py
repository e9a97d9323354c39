"""Tests for the filesystem primitives."""

import os
import stat
from pathlib import Path

import pytest

from conftest import FILE, StubFileSystem
from dirwalk.discovery import LocalFileSystem, create_filesystem, file_mode


def test_file_mode_of_regular_file(tmp_path: Path):
    target = tmp_path / "f.txt"
    target.write_text("x", encoding="utf-8")
    os.chmod(target, 0o640)

    mode = file_mode(target)

    assert stat.S_ISREG(mode)
    assert stat.S_IMODE(mode) == 0o640


def test_file_mode_does_not_follow_symlinks(tmp_path: Path):
    (tmp_path / "dir").mkdir()
    os.symlink(tmp_path / "dir", tmp_path / "link")

    assert stat.S_ISLNK(file_mode(tmp_path / "link"))
    assert stat.S_ISDIR(file_mode(str(tmp_path / "dir")))


def test_file_mode_of_missing_path_is_sentinel(tmp_path: Path):
    assert file_mode(tmp_path / "missing") == -1


def test_file_mode_uses_given_filesystem():
    filesystem = StubFileSystem(listings={}, stats={"/x": FILE})

    assert file_mode("/x", filesystem) == FILE.st_mode
    assert file_mode("/y", filesystem) == -1


def test_local_open_dir_lists_names(tmp_path: Path):
    (tmp_path / "one").write_text("1", encoding="utf-8")
    (tmp_path / "two").mkdir()

    with LocalFileSystem().open_dir(str(tmp_path)) as names:
        listed = sorted(names)

    assert listed == ["one", "two"]


def test_local_open_dir_on_file_raises(tmp_path: Path):
    target = tmp_path / "f.txt"
    target.write_text("x", encoding="utf-8")

    with pytest.raises(NotADirectoryError):
        with LocalFileSystem().open_dir(str(target)):
            pass


def test_create_filesystem():
    filesystem = create_filesystem("local")

    assert isinstance(filesystem, LocalFileSystem)
    assert filesystem.name == "local"


def test_create_filesystem_rejects_unknown_type():
    with pytest.raises(ValueError, match="Unknown filesystem type"):
        create_filesystem("s3")
