"""Bounded worker pool for per-file processing.

Workers pull files from the executor's queue. Completions are consumed on
the calling thread, which is the only place progress and per-file callbacks
run, so output from many workers never interleaves.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Callable, Optional, Sequence

from .models import PlacementResult


DEFAULT_CONCURRENCY = 5


def run_pool(
    files: Sequence[Path],
    concurrency: int,
    process_one: Callable[[Path], PlacementResult],
    progress=None,
    on_result: Optional[Callable[[PlacementResult], None]] = None,
) -> list[PlacementResult]:
    """Process every file with at most ``concurrency`` workers.

    Each file ends in exactly one result and one progress increment, whatever
    its outcome. An exception escaping ``process_one`` fails only that file.
    Results are returned in input order once all files are done.
    """
    if isinstance(concurrency, bool) or not isinstance(concurrency, int) or concurrency < 1:
        raise ValueError(f"concurrency must be a positive integer, got {concurrency!r}")

    results: list[Optional[PlacementResult]] = [None] * len(files)
    if not files:
        return []

    with ThreadPoolExecutor(max_workers=concurrency, thread_name_prefix="organize") as executor:
        futures = {executor.submit(process_one, path): idx for idx, path in enumerate(files)}
        for future in as_completed(futures):
            idx = futures[future]
            try:
                result = future.result()
            except Exception as exc:
                result = PlacementResult.failed(Path(files[idx]), exc)
            results[idx] = result
            if on_result is not None:
                on_result(result)
            if progress is not None:
                progress.increment()

    return [r for r in results if r is not None]
