"""Error conditions raised or reported by the board core."""
from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional


class BoardError(Exception):
    """Base class for every condition the core surfaces to callers."""


class MissingFields(BoardError, ValueError):
    def __init__(self, fields: Iterable[str]) -> None:
        self.fields = tuple(fields)
        super().__init__(
            "Please fill out all required fields before submitting the report "
            f"(missing: {', '.join(self.fields)})."
        )


class ImageTooLarge(BoardError, ValueError):
    """Picture exceeds the configured byte cap; raised before any read."""

    def __init__(self, size: int, limit: int) -> None:
        self.size = size
        self.limit = limit
        super().__init__(
            f"Image is too large ({_megabytes(size)} MB). "
            f"Max size is {_megabytes(limit)} MB for local storage."
        )


class ImageReadFailed(BoardError):
    def __init__(self, name: str, cause: BaseException) -> None:
        self.name = name
        self.cause = cause
        super().__init__(f"Could not read image {name or '<memory>'}: {cause}")


class IdentityUnavailable(BoardError):
    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        super().__init__(f"Local user id at {path} is unavailable: {reason}")


class StorageCorrupt(BoardError):
    """Persisted collection could not be parsed; the session starts empty."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        super().__init__(
            f"Could not load data from {path} ({reason}). Starting with a blank slate."
        )


class StorageWriteFailed(BoardError):
    """Persisting the collection failed; in-memory data is still live."""

    def __init__(self, path: Path, cause: Optional[BaseException] = None) -> None:
        self.path = path
        self.cause = cause
        detail = f": {cause}" if cause else ""
        super().__init__(
            f"Could not save reports to {path}{detail}. "
            "Changes may not survive a restart."
        )


def _megabytes(size: int) -> str:
    return f"{size / 1024 / 1024:.2f}"
