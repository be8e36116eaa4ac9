from __future__ import annotations

from collections import Counter

from .models import COPIED, FAILED, SKIPPED, PlacementResult, RunSummary


def summarize(results: list[PlacementResult]) -> RunSummary:
    status_counts = Counter(r.status for r in results)

    bytes_copied = 0
    genres = Counter()
    for r in results:
        if r.status == FAILED or r.destination is None:
            continue
        genres[r.destination.parent.name] += 1
        if r.status == COPIED:
            try:
                bytes_copied += r.destination.stat().st_size
            except OSError:
                pass

    return RunSummary(
        copied=status_counts[COPIED],
        skipped=status_counts[SKIPPED],
        failed=status_counts[FAILED],
        total=len(results),
        bytes_copied=bytes_copied,
        genres=dict(sorted(genres.items())),
    )


def human_size(num_bytes: int) -> str:
    return f"{bytes_to_mb(num_bytes):.2f} MB"


def bytes_to_mb(num_bytes: int) -> float:
    return num_bytes / (1024 * 1024)
