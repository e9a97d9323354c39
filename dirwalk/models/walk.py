"""Data models for directory walks."""

from collections import Counter
from datetime import datetime, timezone
from enum import Flag, IntEnum, auto

from pydantic import BaseModel, ConfigDict, Field, field_serializer


class WalkResult(IntEnum):
    """Outcome code of a walk (one per top-level invocation)."""
    OK = 0
    NAME_TOO_LONG = 1
    CANNOT_OPEN = 2
    CANNOT_STAT = 3
    IO_ERROR = 4


class WalkFlag(Flag):
    """Set-of-options form of WalkOptions."""
    NONE = 0
    RECURSIVE = auto()
    FOLLOW_SYMLINKS = auto()
    INCLUDE_DOTFILES = auto()
    MATCH_DIRECTORIES = auto()


class WalkOptions(BaseModel):
    """Immutable traversal options."""

    model_config = ConfigDict(frozen=True)

    recursive: bool = Field(default=False, description="Descend into subdirectories")
    follow_symlinks: bool = Field(
        default=False,
        description="Treat symlinked directories as traversable instead of skipping symlinks",
    )
    include_dotfiles: bool = Field(
        default=False,
        description="Include entries whose name starts with '.'",
    )
    match_directories: bool = Field(
        default=False,
        description="Emit directory entries themselves, not only non-directories",
    )

    @classmethod
    def from_flags(cls, flags: WalkFlag) -> "WalkOptions":
        """Build options from a WalkFlag combination."""
        return cls(
            recursive=WalkFlag.RECURSIVE in flags,
            follow_symlinks=WalkFlag.FOLLOW_SYMLINKS in flags,
            include_dotfiles=WalkFlag.INCLUDE_DOTFILES in flags,
            match_directories=WalkFlag.MATCH_DIRECTORIES in flags,
        )

    @property
    def flags(self) -> WalkFlag:
        """Return the options as a WalkFlag combination."""
        flags = WalkFlag.NONE
        if self.recursive:
            flags |= WalkFlag.RECURSIVE
        if self.follow_symlinks:
            flags |= WalkFlag.FOLLOW_SYMLINKS
        if self.include_dotfiles:
            flags |= WalkFlag.INCLUDE_DOTFILES
        if self.match_directories:
            flags |= WalkFlag.MATCH_DIRECTORIES
        return flags


class WalkError(BaseModel):
    """A single problem met during a walk."""

    path: str = Field(description="Path of the directory or entry that failed")
    kind: WalkResult = Field(description="Error category")
    message: str | None = Field(default=None, description="OS error text, if any")
    depth: int = Field(default=0, ge=0, description="Recursion depth (0 is the root frame)")

    @field_serializer("kind")
    def serialize_kind(self, kind: WalkResult) -> str:
        """Serialize the error kind by name."""
        return kind.name


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class WalkReport(BaseModel):
    """Statistics and accumulated errors for one walk."""

    root: str
    options: WalkOptions = Field(default_factory=WalkOptions)
    result: WalkResult = WalkResult.OK
    errors: list[WalkError] = Field(default_factory=list)
    matched: int = 0
    directories_opened: int = 0
    hidden_skipped: int = 0
    symlinks_skipped: int = 0
    cycles_skipped: int = 0
    start_time: datetime = Field(default_factory=_utcnow)
    end_time: datetime | None = None

    @property
    def ok(self) -> bool:
        """Whether the whole tree was walked without any error."""
        return self.result is WalkResult.OK and not self.errors

    @property
    def duration_seconds(self) -> float:
        """Calculate duration in seconds."""
        end = self.end_time or _utcnow()
        return (end - self.start_time).total_seconds()

    def record_error(
        self,
        path: str,
        kind: WalkResult,
        message: str | None = None,
        depth: int = 0,
    ) -> WalkError:
        """Append an error and return it."""
        error = WalkError(path=path, kind=kind, message=message, depth=depth)
        self.errors.append(error)
        return error

    def errors_by_kind(self) -> dict[WalkResult, int]:
        """Count accumulated errors per kind."""
        return dict(Counter(error.kind for error in self.errors))

    def summary(self) -> str:
        """Generate human-readable summary."""
        lines = [
            f"Walk of {self.root} finished: {self.result.name}",
            f"  Paths matched: {self.matched:,}",
            f"  Directories opened: {self.directories_opened:,}",
            f"  Hidden entries skipped: {self.hidden_skipped:,}",
            f"  Symlinks skipped: {self.symlinks_skipped:,}",
            f"  Symlink cycles skipped: {self.cycles_skipped:,}",
            f"  Errors: {len(self.errors):,}",
        ]
        for kind, count in sorted(self.errors_by_kind().items()):
            lines.append(f"    {kind.name}: {count:,}")
        lines.append(f"  Time elapsed: {self.duration_seconds:.3f}s")
        return "\n".join(lines)
