from __future__ import annotations

import os
from pathlib import Path

from .errors import DirectoryListError, RootScanError
from .metadata import is_audio_file
from .models import ScanResult


def _check_root(root: Path) -> None:
    if not root.exists():
        raise RootScanError(root, "directory does not exist")
    if not root.is_dir():
        raise RootScanError(root, "not a directory")
    try:
        with os.scandir(root):
            pass
    except OSError as exc:
        raise RootScanError(root, exc) from exc


def scan_audio_files(root: Path, verbose: bool = False) -> ScanResult:
    root = Path(root).expanduser().resolve()
    _check_root(root)

    files: list[Path] = []
    warnings: list[str] = []

    def _on_walk_error(err: OSError) -> None:
        target = getattr(err, "filename", None) or str(root)
        if Path(target) == root:
            raise RootScanError(root, err) from err
        message = f"walk error: {DirectoryListError(Path(target), err)}"
        warnings.append(message)
        if verbose:
            print(f"[scan-warning] {message}")

    for dirpath, dirnames, filenames in os.walk(root, onerror=_on_walk_error):
        dirnames.sort()
        base = Path(dirpath)
        for name in sorted(filenames):
            path = base / name
            try:
                if is_audio_file(path):
                    files.append(path)
            except OSError as exc:
                message = f"file skipped: {path}: {exc.strerror or str(exc)}"
                warnings.append(message)
                if verbose:
                    print(f"[scan-warning] {message}")

    return ScanResult(files=files, warnings=warnings)
