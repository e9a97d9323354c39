"""Recursive directory walker with dotfile, symlink and directory-match options."""

import os
import stat
from collections.abc import Callable, Generator, Iterator
from contextlib import ExitStack, closing
from datetime import datetime, timezone

import structlog

from dirwalk.models.walk import WalkOptions, WalkReport, WalkResult

from .filesystem import FileSystem, LocalFileSystem

logger = structlog.get_logger()

MAX_PATH_LENGTH = 4096

EntryCallback = Callable[[str], None]


def _encoded_length(path: str) -> int:
    return len(os.fsencode(path))


def _frame_result(stat_failed: bool, name_too_long: bool, read_failed: bool) -> WalkResult:
    """Map the errors seen while scanning one directory to its result code.

    A failed stat wins over an over-length entry, which wins over a failed read.
    """
    if stat_failed:
        return WalkResult.CANNOT_STAT
    if name_too_long:
        return WalkResult.NAME_TOO_LONG
    if read_failed:
        return WalkResult.IO_ERROR
    return WalkResult.OK


class DirectoryWalker:
    """Walks a directory tree depth-first and yields the matching paths."""

    def __init__(
        self,
        options: WalkOptions | None = None,
        filesystem: FileSystem | None = None,
        max_path_length: int = MAX_PATH_LENGTH,
    ):
        """Initialize walker.

        Args:
            options: Traversal options (defaults: nothing enabled)
            filesystem: Filesystem primitives (defaults to the local disk)
            max_path_length: Maximum path length in bytes, terminator included
        """
        self.options = options or WalkOptions()
        self.filesystem = filesystem or LocalFileSystem()
        self.max_path_length = max_path_length

    def iter_paths(
        self,
        root: str | os.PathLike[str],
        report: WalkReport | None = None,
    ) -> Iterator[str]:
        """Lazily walk ``root`` and yield every matched path.

        Errors never interrupt the walk. They are recorded on ``report``
        together with the counters and the root directory's result code,
        all of which are final once the iterator is exhausted. Stopping
        early closes every open directory handle.

        Args:
            root: Directory to start from
            report: Report to fill in (a fresh one is used if None)

        Yields:
            Paths built by joining each parent directory and entry name
        """
        root = os.fspath(root)
        if report is None:
            report = WalkReport(root=root, options=self.options)

        logger.info(
            "walk_started",
            root=root,
            filesystem=self.filesystem.name,
            **self.options.model_dump(),
        )

        try:
            report.result = yield from self._walk_dir(root, report, depth=0, ancestors=frozenset())
        finally:
            report.end_time = datetime.now(timezone.utc)

        logger.info(
            "walk_completed",
            root=root,
            result=report.result.name,
            matched=report.matched,
            errors=len(report.errors),
            duration_seconds=f"{report.duration_seconds:.3f}",
        )

    def walk(self, root: str | os.PathLike[str], callback: EntryCallback) -> WalkReport:
        """Walk ``root`` and invoke ``callback`` once per matched path.

        Exceptions raised by the callback propagate after the open
        directory handles are closed.

        Returns:
            WalkReport with the result code, counters and every error met
        """
        report = WalkReport(root=os.fspath(root), options=self.options)
        with closing(self.iter_paths(root, report)) as paths:
            for path in paths:
                callback(path)
        return report

    def _walk_dir(
        self,
        path: str,
        report: WalkReport,
        depth: int,
        ancestors: frozenset[tuple[int, int]],
    ) -> Generator[str, None, WalkResult]:
        """Scan one directory, recursing into subdirectories as configured."""
        if _encoded_length(path) >= self.max_path_length - 1:
            logger.warning(
                "directory_name_too_long",
                path=path,
                depth=depth,
                max_path_length=self.max_path_length,
                likely_cause="Tree is nested deeper than the path length limit allows",
                developer_action="Raise max_path_length or walk from a deeper root",
            )
            report.record_error(path, WalkResult.NAME_TOO_LONG, depth=depth)
            return WalkResult.NAME_TOO_LONG

        stat_failed = name_too_long = read_failed = False

        with ExitStack() as stack:
            try:
                names = stack.enter_context(self.filesystem.open_dir(path))
            except OSError as e:
                logger.warning(
                    "directory_open_failed",
                    path=path,
                    depth=depth,
                    error=str(e),
                    likely_cause="Path is missing, not a directory, or not readable",
                    developer_action="Check the path exists and grants read and execute permission",
                )
                report.record_error(path, WalkResult.CANNOT_OPEN, str(e), depth)
                return WalkResult.CANNOT_OPEN

            report.directories_opened += 1
            if self.options.follow_symlinks:
                ancestors = ancestors | self._identity(path)

            entries = iter(names)
            while True:
                try:
                    name = next(entries)
                except StopIteration:
                    break
                except OSError as e:
                    logger.warning(
                        "directory_read_failed",
                        path=path,
                        depth=depth,
                        error=str(e),
                        likely_cause="Directory changed or became unreachable during the listing",
                        developer_action="Check filesystem health and rerun the walk",
                    )
                    report.record_error(path, WalkResult.IO_ERROR, str(e), depth)
                    read_failed = True
                    break

                if name in (".", ".."):
                    continue
                if not self.options.include_dotfiles and name.startswith("."):
                    report.hidden_skipped += 1
                    continue

                child = os.path.join(path, name)
                if _encoded_length(child) >= self.max_path_length:
                    logger.warning(
                        "entry_name_too_long",
                        path=child,
                        depth=depth,
                        max_path_length=self.max_path_length,
                    )
                    report.record_error(child, WalkResult.NAME_TOO_LONG, depth=depth)
                    name_too_long = True
                    continue

                try:
                    st = self.filesystem.lstat(child)
                except OSError as e:
                    logger.warning(
                        "entry_stat_failed",
                        path=child,
                        depth=depth,
                        error=str(e),
                        likely_cause="Entry was removed during the walk or its metadata is unreadable",
                        developer_action="Check permissions on the parent directory",
                    )
                    report.record_error(child, WalkResult.CANNOT_STAT, str(e), depth)
                    stat_failed = True
                    continue

                if stat.S_ISLNK(st.st_mode):
                    if not self.options.follow_symlinks:
                        logger.debug("symlink_skipped", path=child)
                        report.symlinks_skipped += 1
                        continue
                    st = self._resolve_symlink(child, st)

                if stat.S_ISDIR(st.st_mode):
                    if self.options.recursive:
                        if self.options.follow_symlinks and (st.st_dev, st.st_ino) in ancestors:
                            logger.warning(
                                "symlink_cycle_skipped",
                                path=child,
                                depth=depth,
                                reason="Directory is already being walked",
                            )
                            report.cycles_skipped += 1
                        else:
                            # Nested result codes are not merged; their errors are on the report.
                            yield from self._walk_dir(child, report, depth + 1, ancestors)
                    if not self.options.match_directories:
                        continue

                report.matched += 1
                yield child

        return _frame_result(stat_failed, name_too_long, read_failed)

    def _identity(self, path: str) -> frozenset[tuple[int, int]]:
        try:
            st = self.filesystem.stat(path)
        except OSError:
            return frozenset()
        return frozenset({(st.st_dev, st.st_ino)})

    def _resolve_symlink(self, path: str, link_stat: os.stat_result) -> os.stat_result:
        """Return the target's metadata, or the link's own if the target is unreachable."""
        try:
            return self.filesystem.stat(path)
        except OSError as e:
            logger.debug("symlink_target_unreachable", path=path, error=str(e))
            return link_stat


def iter_paths(
    root: str | os.PathLike[str],
    options: WalkOptions | None = None,
    *,
    filesystem: FileSystem | None = None,
    max_path_length: int = MAX_PATH_LENGTH,
) -> Iterator[str]:
    """Lazily yield every path under ``root`` matched by ``options``."""
    walker = DirectoryWalker(options, filesystem, max_path_length)
    return walker.iter_paths(root)


def walk(
    root: str | os.PathLike[str],
    callback: EntryCallback,
    options: WalkOptions | None = None,
    *,
    filesystem: FileSystem | None = None,
    max_path_length: int = MAX_PATH_LENGTH,
) -> WalkResult:
    """Walk ``root``, calling ``callback`` for each matched path.

    Returns:
        Result code of the root directory's scan
    """
    walker = DirectoryWalker(options, filesystem, max_path_length)
    return walker.walk(root, callback).result
