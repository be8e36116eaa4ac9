from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


UNKNOWN_GENRE = "Unknown"

COPIED = "copied"
SKIPPED = "skipped"
FAILED = "failed"


@dataclass
class TrackMetadata:
    path: Path
    title: Optional[str] = None
    artist: Optional[str] = None
    album: Optional[str] = None
    genres: list[str] = field(default_factory=list)
    duration_seconds: Optional[int] = None

    @property
    def genre(self) -> str:
        """The first genre tag, or ``Unknown`` when it is missing or blank."""
        if not self.genres:
            return UNKNOWN_GENRE
        return self.genres[0].strip() or UNKNOWN_GENRE


@dataclass
class PlacementResult:
    source: Path
    status: str
    destination: Optional[Path] = None
    genre: str = ""
    reason: str = ""
    error: Optional[BaseException] = None

    @classmethod
    def copied(cls, source: Path, destination: Path, genre: str) -> "PlacementResult":
        return cls(source=source, status=COPIED, destination=destination, genre=genre)

    @classmethod
    def skipped(cls, source: Path, destination: Path, genre: str) -> "PlacementResult":
        return cls(source=source, status=SKIPPED, destination=destination, genre=genre, reason="already exists")

    @classmethod
    def failed(cls, source: Path, error: BaseException, genre: str = "") -> "PlacementResult":
        return cls(source=source, status=FAILED, genre=genre, error=error)


@dataclass
class ScanResult:
    files: list[Path]
    warnings: list[str]


@dataclass
class RunSummary:
    copied: int
    skipped: int
    failed: int
    total: int
    bytes_copied: int
    genres: dict[str, int]


@dataclass
class RunReport:
    source_root: Path
    destination_root: Path
    results: list[PlacementResult]
    scan_warnings: list[str]
    summary: RunSummary

    @property
    def failures(self) -> list[PlacementResult]:
        return [r for r in self.results if r.status == FAILED]
