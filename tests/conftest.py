"""Shared fixtures: real trees under tmp_path and a scriptable stub filesystem."""

import errno
import os
import stat
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import pytest

from dirwalk.discovery import DirectoryWalker, FileSystem
from dirwalk.models import WalkOptions, WalkReport


def make_stat(mode: int, ino: int = 0, dev: int = 0) -> os.stat_result:
    """Build a stat result with only mode, inode and device set."""
    return os.stat_result((mode, ino, dev, 1, 0, 0, 0, 0, 0, 0))


FILE = make_stat(stat.S_IFREG | 0o644)
DIRECTORY = make_stat(stat.S_IFDIR | 0o755)
SYMLINK = make_stat(stat.S_IFLNK | 0o777)


class StubFileSystem(FileSystem):
    """In-memory filesystem driven by plain dictionaries.

    ``listings`` maps a directory path to its names; a listing may itself be
    an OSError (open fails) or contain OSError items (raised mid-listing).
    ``stats`` maps paths to lstat results or OSError; ``targets`` does the
    same for stat on symlinks.
    """

    def __init__(
        self,
        listings: dict[str, list | OSError],
        stats: dict[str, os.stat_result | OSError] | None = None,
        targets: dict[str, os.stat_result | OSError] | None = None,
    ):
        self.listings = listings
        self.stats = stats or {}
        self.targets = targets or {}
        self.opened: list[str] = []
        self.closed: list[str] = []

    @property
    def name(self) -> str:
        return "stub"

    @contextmanager
    def open_dir(self, path: str) -> Iterator[Iterator[str]]:
        listing = self.listings.get(path)
        if listing is None:
            raise FileNotFoundError(errno.ENOENT, "No such file or directory", path)
        if isinstance(listing, OSError):
            raise listing
        self.opened.append(path)
        try:
            yield self._names(listing)
        finally:
            self.closed.append(path)

    @staticmethod
    def _names(listing: list) -> Iterator[str]:
        for item in listing:
            if isinstance(item, OSError):
                raise item
            yield item

    def lstat(self, path: str) -> os.stat_result:
        return self._lookup(self.stats, path)

    def stat(self, path: str) -> os.stat_result:
        if path in self.targets:
            return self._lookup(self.targets, path)
        return self._lookup(self.stats, path)

    @staticmethod
    def _lookup(table: dict, path: str) -> os.stat_result:
        value = table.get(path)
        if value is None:
            raise FileNotFoundError(errno.ENOENT, "No such file or directory", path)
        if isinstance(value, OSError):
            raise value
        return value


def collect(
    root: str | os.PathLike[str],
    options: WalkOptions | None = None,
    filesystem: FileSystem | None = None,
    **kwargs,
) -> tuple[set[str], WalkReport]:
    """Walk ``root`` and return the emitted paths with the report."""
    found: list[str] = []
    report = DirectoryWalker(options, filesystem, **kwargs).walk(root, found.append)
    assert len(found) == len(set(found)), "a path was emitted twice"
    return set(found), report


@pytest.fixture
def sample_tree(tmp_path: Path) -> Path:
    """Create a small tree.

    root/
        a.txt
        .hidden
        sub/
            b.txt
            .secret
            deeper/
                c.txt
    """
    root = tmp_path / "root"
    root.mkdir()
    (root / "a.txt").write_text("a", encoding="utf-8")
    (root / ".hidden").write_text("hidden", encoding="utf-8")

    sub = root / "sub"
    sub.mkdir()
    (sub / "b.txt").write_text("b", encoding="utf-8")
    (sub / ".secret").write_text("secret", encoding="utf-8")

    deeper = sub / "deeper"
    deeper.mkdir()
    (deeper / "c.txt").write_text("c", encoding="utf-8")

    return root


@pytest.fixture
def stub_fs() -> StubFileSystem:
    """Stub tree: /r holds a file, a hidden file and a subdirectory with one file."""
    return StubFileSystem(
        listings={
            "/r": [".", "..", "a.txt", ".hidden", "sub"],
            "/r/sub": ["b.txt"],
        },
        stats={
            "/r": DIRECTORY,
            "/r/a.txt": FILE,
            "/r/.hidden": FILE,
            "/r/sub": DIRECTORY,
            "/r/sub/b.txt": FILE,
        },
    )
