from __future__ import annotations

import argparse
from pathlib import Path
from typing import Optional, Sequence

from .errors import RootScanError
from .exporters import export_results_csv, write_warnings_log
from .metrics import human_size
from .organizer import organize_by_genre
from .progress import ProgressPrinter
from .scheduler import DEFAULT_CONCURRENCY


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {value!r}")
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="genre-organizer",
        description="Copy audio files into folders named after their genre tag.",
    )
    parser.add_argument(
        "source",
        type=Path,
        nargs="?",
        default=Path("./music"),
        help="Music directory to scan (default: ./music)",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path("./organized-by-genre"),
        help="Destination root for genre folders (default: ./organized-by-genre)",
    )
    parser.add_argument(
        "-j",
        "--concurrency",
        type=_positive_int,
        default=DEFAULT_CONCURRENCY,
        help=f"Number of files processed in parallel (default: {DEFAULT_CONCURRENCY})",
    )
    parser.add_argument(
        "--report-csv",
        type=Path,
        default=None,
        help="Write the outcome of every file to this CSV file",
    )
    parser.add_argument(
        "--warnings-log",
        type=Path,
        default=None,
        help="Write scan warnings and per-file failures to this file",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Print per-file copy/skip details",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    source: Path = args.source.expanduser().resolve()
    output_dir: Path = args.output_dir.expanduser().resolve()

    print(f"[start] scanning: {source}")
    print(f"[start] destination root: {output_dir}")
    try:
        report = organize_by_genre(
            source,
            output_dir,
            concurrency=args.concurrency,
            progress=ProgressPrinter("organize"),
            verbose=args.verbose,
        )
    except RootScanError as exc:
        raise SystemExit(f"Cannot scan source directory: {exc}")
    except OSError as exc:
        raise SystemExit(f"Cannot create destination directory: {output_dir}: {exc.strerror or exc}")

    summary = report.summary
    if summary.total == 0:
        print("[done] no supported audio files found")
    else:
        print(f"[done] files processed: {summary.total}")
        print(f"[done] copied: {summary.copied} ({human_size(summary.bytes_copied)})")
        print(f"[done] skipped (already exists): {summary.skipped}")
        print(f"[done] failed: {summary.failed}")
        if summary.genres:
            print("[done] files per genre:")
            for genre, count in summary.genres.items():
                print(f"  - {genre}: {count}")

    failure_lines = []
    for r in report.failures:
        print(f"[failed] {r.source}: {r.error}")
        failure_lines.append(f"failed: {r.source}: {r.error}")

    if report.scan_warnings:
        print(f"[warn] scan warnings: {len(report.scan_warnings)}")
        for warning in report.scan_warnings:
            print(f"[warn] {warning}")

    if args.warnings_log and (report.scan_warnings or failure_lines):
        write_warnings_log(args.warnings_log, report.scan_warnings + failure_lines)
        print(f"[warn] details written: {args.warnings_log}")

    if args.report_csv:
        export_results_csv(args.report_csv, report.results)
        print(f"[write] CSV report: {args.report_csv}")


if __name__ == "__main__":
    main()
