"""Discovery package initialization."""

from .filesystem import FileSystem, LocalFileSystem, create_filesystem, file_mode
from .walker import MAX_PATH_LENGTH, DirectoryWalker, EntryCallback, iter_paths, walk

__all__ = [
    "FileSystem",
    "LocalFileSystem",
    "create_filesystem",
    "file_mode",
    "MAX_PATH_LENGTH",
    "DirectoryWalker",
    "EntryCallback",
    "iter_paths",
    "walk",
]
