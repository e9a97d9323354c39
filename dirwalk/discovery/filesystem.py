"""Filesystem primitive interface and the local POSIX implementation."""

import os
from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import AbstractContextManager, contextmanager

import structlog

logger = structlog.get_logger()


class FileSystem(ABC):
    """Abstract base class for the primitives a walk consumes.

    Implement this interface to walk something other than the local disk,
    or to stub filesystem behaviour in tests.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the name of this filesystem implementation."""
        pass

    @abstractmethod
    def open_dir(self, path: str) -> AbstractContextManager[Iterator[str]]:
        """Open a directory for listing.

        Args:
            path: Directory path

        Returns:
            Context manager yielding an iterator of entry names. Entering it
            raises OSError if the directory cannot be opened; the iterator
            raises OSError if reading fails part way. Leaving it releases
            the handle.
        """
        pass

    @abstractmethod
    def lstat(self, path: str) -> os.stat_result:
        """Return metadata without following a final symlink."""
        pass

    @abstractmethod
    def stat(self, path: str) -> os.stat_result:
        """Return metadata of the symlink target."""
        pass

    def mode(self, path: str) -> int:
        """Return raw st_mode bits of ``path``, or -1 if it cannot be inspected."""
        try:
            return self.lstat(path).st_mode
        except OSError as e:
            logger.debug("mode_unavailable", path=path, error=str(e))
            return -1


class LocalFileSystem(FileSystem):
    """Local disk access through os.scandir and os.lstat."""

    @property
    def name(self) -> str:
        return "local"

    @contextmanager
    def open_dir(self, path: str) -> Iterator[Iterator[str]]:
        with os.scandir(path) as entries:
            yield (entry.name for entry in entries)

    def lstat(self, path: str) -> os.stat_result:
        return os.lstat(path)

    def stat(self, path: str) -> os.stat_result:
        return os.stat(path)


def create_filesystem(filesystem_type: str = "local") -> FileSystem:
    """Create a filesystem implementation by type.

    Args:
        filesystem_type: Type of filesystem to create
            - "local": the local disk (default)

    Returns:
        FileSystem instance

    Raises:
        ValueError: If filesystem_type is not recognized
    """
    filesystems = {
        "local": LocalFileSystem,
    }

    if filesystem_type not in filesystems:
        raise ValueError(
            f"Unknown filesystem type: {filesystem_type}. "
            f"Available types: {list(filesystems.keys())}"
        )

    return filesystems[filesystem_type]()


def file_mode(path: str | os.PathLike[str], filesystem: FileSystem | None = None) -> int:
    """Return the raw file mode bits of ``path`` without following a final symlink.

    Returns -1 when the path does not exist or cannot be inspected.
    """
    filesystem = filesystem or LocalFileSystem()
    return filesystem.mode(os.fspath(path))
