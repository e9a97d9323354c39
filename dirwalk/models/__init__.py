"""Models package initialization."""

from .walk import WalkError, WalkFlag, WalkOptions, WalkReport, WalkResult

__all__ = [
    "WalkError",
    "WalkFlag",
    "WalkOptions",
    "WalkReport",
    "WalkResult",
]
