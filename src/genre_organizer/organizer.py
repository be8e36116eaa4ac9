from __future__ import annotations

import re
import shutil
from pathlib import Path
from typing import Optional

from .errors import MetadataError, PlacementError
from .metadata import Decoder, decode_tags, read_metadata
from .metrics import summarize
from .models import COPIED, SKIPPED, UNKNOWN_GENRE, PlacementResult, RunReport
from .progress import NullProgress
from .scanner import scan_audio_files
from .scheduler import DEFAULT_CONCURRENCY, run_pool


INVALID_CHARS = re.compile(r"[<>:\"/\\|?*\x00-\x1F]")


def sanitize_name(value: str) -> str:
    value = INVALID_CHARS.sub("", value).strip()
    # "." and ".." would resolve to the parent folders, not a genre folder.
    if value in {"", ".", ".."}:
        return UNKNOWN_GENRE
    return value


def target_path_for(source: Path, genre: str, destination_root: Path) -> Path:
    return destination_root / sanitize_name(genre) / source.name


def _copy_exclusive(source: Path, target: Path) -> None:
    # "xb" refuses to open an existing file, so a concurrent copy to the
    # same target can never be overwritten.
    with source.open("rb") as src:
        with target.open("xb") as dst:
            try:
                shutil.copyfileobj(src, dst)
            except BaseException:
                dst.close()
                target.unlink(missing_ok=True)
                raise
    try:
        shutil.copystat(source, target)
    except OSError:
        # FAT and SMB mounts may reject timestamps or mode bits.
        pass


def place_file(source: Path, genre: str, destination_root: Path) -> PlacementResult:
    """Copy ``source`` into ``destination_root/<sanitized genre>/``.

    An existing destination file is never touched: the result is a skip.
    I/O errors become a failed result. The source is only ever read.
    """
    source = Path(source)
    target = target_path_for(source, genre, Path(destination_root))
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        if target.exists():
            return PlacementResult.skipped(source, target, genre)
        try:
            _copy_exclusive(source, target)
        except FileExistsError:
            return PlacementResult.skipped(source, target, genre)
    except OSError as exc:
        return PlacementResult.failed(source, PlacementError(source, exc), genre)
    return PlacementResult.copied(source, target, genre)


def process_file(path: Path, destination_root: Path, decoder: Decoder = decode_tags) -> PlacementResult:
    metadata = read_metadata(path, decoder=decoder)
    if isinstance(metadata, MetadataError):
        return PlacementResult.failed(Path(path), metadata)
    return place_file(path, metadata.genre, destination_root)


def organize_by_genre(
    source_root: Path,
    destination_root: Path,
    concurrency: int = DEFAULT_CONCURRENCY,
    progress=None,
    decoder: Decoder = decode_tags,
    verbose: bool = False,
) -> RunReport:
    """Copy every audio file under ``source_root`` into per-genre folders.

    Raises ``RootScanError`` when the source root cannot be scanned and
    ``OSError`` when the destination root cannot be created. Per-file
    problems are reported in the returned ``RunReport``.
    """
    source_root = Path(source_root).expanduser().resolve()
    destination_root = Path(destination_root).expanduser().resolve()
    progress = progress if progress is not None else NullProgress()

    destination_root.mkdir(parents=True, exist_ok=True)

    scan_result = scan_audio_files(source_root, verbose=verbose)
    files = scan_result.files

    if not files:
        return RunReport(
            source_root=source_root,
            destination_root=destination_root,
            results=[],
            scan_warnings=scan_result.warnings,
            summary=summarize([]),
        )

    def _process(path: Path) -> PlacementResult:
        return process_file(path, destination_root, decoder)

    def _on_result(result: PlacementResult) -> None:
        if not verbose:
            return
        if result.status == COPIED:
            print(f"[copy] {result.source} -> {result.destination}")
        elif result.status == SKIPPED:
            print(f"[skip] {result.destination} ({result.reason})")

    print(f"[organize] files found: {len(files)}")
    progress.start(len(files))
    try:
        results = run_pool(files, concurrency, _process, progress=progress, on_result=_on_result)
    finally:
        progress.stop()

    return RunReport(
        source_root=source_root,
        destination_root=destination_root,
        results=results,
        scan_warnings=scan_result.warnings,
        summary=summarize(results),
    )
