from __future__ import annotations

import sys
from typing import Optional, TextIO


class ProgressPrinter:
    """Textual progress bar for one stage of a run.

    On a terminal the bar is redrawn in place; otherwise a line is printed
    every ten percent so logs stay readable.
    """

    def __init__(self, stage: str, stream: Optional[TextIO] = None, width: int = 30) -> None:
        self.stage = stage
        self.stream = stream if stream is not None else sys.stdout
        self.width = width
        self.total = 0
        self.current = 0
        self._last_percent = -1
        self._active = False

    @property
    def is_tty(self) -> bool:
        isatty = getattr(self.stream, "isatty", None)
        return bool(isatty and isatty())

    def start(self, total: int) -> None:
        self.total = max(0, int(total))
        self.current = 0
        self._last_percent = -1
        self._active = True
        self._render()

    def increment(self, step: int = 1) -> None:
        self.update(self.current + step)

    def update(self, current: int) -> None:
        self.current = max(0, min(int(current), self.total))
        self._render()

    def stop(self) -> None:
        if not self._active:
            return
        self._active = False
        if self.is_tty and self.current < self.total:
            print(file=self.stream, flush=True)

    def _bar(self, percent: int) -> str:
        filled = self.width * percent // 100
        return "█" * filled + "░" * (self.width - filled)

    def _render(self) -> None:
        if not self._active:
            return
        current, total = self.current, self.total
        percent = 100 if total <= 0 else int((current / total) * 100)
        percent = max(0, min(100, percent))

        if self.is_tty:
            if percent == self._last_percent and current < total:
                return
            end = "\n" if current >= total else ""
            print(
                f"\r[{self.stage}] |{self._bar(percent)}| {percent:3d}% ({current}/{total} files)",
                end=end,
                file=self.stream,
                flush=True,
            )
            self._last_percent = percent
            return

        should_print = (
            self._last_percent < 0
            or current >= total
            or percent >= self._last_percent + 10
        )
        if should_print:
            print(f"[{self.stage}] {percent:3d}% ({current}/{total})", file=self.stream)
            self._last_percent = percent


class NullProgress:
    def start(self, total: int) -> None:
        pass

    def increment(self, step: int = 1) -> None:
        pass

    def update(self, current: int) -> None:
        pass

    def stop(self) -> None:
        pass
