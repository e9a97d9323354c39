"""Recursive directory walking over POSIX filesystems."""

from dirwalk.discovery import (
    MAX_PATH_LENGTH,
    DirectoryWalker,
    FileSystem,
    LocalFileSystem,
    create_filesystem,
    file_mode,
    iter_paths,
    walk,
)
from dirwalk.models import WalkError, WalkFlag, WalkOptions, WalkReport, WalkResult

__version__ = "1.0.0"

__all__ = [
    "MAX_PATH_LENGTH",
    "DirectoryWalker",
    "FileSystem",
    "LocalFileSystem",
    "create_filesystem",
    "file_mode",
    "iter_paths",
    "walk",
    "WalkError",
    "WalkFlag",
    "WalkOptions",
    "WalkReport",
    "WalkResult",
]
