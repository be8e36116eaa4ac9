from __future__ import annotations

from pathlib import Path


class OrganizerError(Exception):
    """Base exception for genre organizer errors."""


class ScanError(OrganizerError):
    """Raised when a directory in the source tree cannot be listed."""

    def __init__(self, path: Path, cause: BaseException | str) -> None:
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"{self.path}: {_describe(cause)}")


class RootScanError(ScanError):
    """The source root itself is missing or unreadable. Fatal to a run."""


class DirectoryListError(ScanError):
    """A nested directory could not be listed; its subtree is skipped."""


class MetadataError(OrganizerError):
    """Tags could not be decoded from an audio file."""

    def __init__(self, path: Path, cause: BaseException | str) -> None:
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"metadata unreadable: {_describe(cause)}")


class PlacementError(OrganizerError):
    """Creating the genre folder or copying the file failed."""

    def __init__(self, path: Path, cause: BaseException | str) -> None:
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"placement failed: {_describe(cause)}")


def _describe(cause: BaseException | str) -> str:
    if isinstance(cause, OSError) and cause.strerror:
        return cause.strerror
    text = str(cause)
    if isinstance(cause, BaseException) and not text:
        return type(cause).__name__
    return text
