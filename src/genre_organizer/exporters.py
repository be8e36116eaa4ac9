from __future__ import annotations

import csv
from pathlib import Path

from .models import PlacementResult


RESULT_COLUMNS = [
    "source",
    "status",
    "genre",
    "destination",
    "reason",
    "error",
]


def export_results_csv(path: Path, results: list[PlacementResult]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=RESULT_COLUMNS)
        writer.writeheader()
        for r in results:
            writer.writerow(
                {
                    "source": str(r.source),
                    "status": r.status,
                    "genre": r.genre,
                    "destination": str(r.destination) if r.destination else "",
                    "reason": r.reason,
                    "error": str(r.error) if r.error else "",
                }
            )


def write_warnings_log(path: Path, lines: list[str]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
