# paper_latest/core/progress.py
"""
Byte-count progress bars on the diagnostic console.

Each pipeline step gets its own bar. A ProgressTracker is a context manager:
it starts drawing on enter and is finalized exactly once, either explicitly
with finish()/abandon() or implicitly on exit (abandon when an exception is
escaping, finish otherwise).
"""
from __future__ import annotations
from types import TracebackType
from typing import BinaryIO, Iterable, Iterator, Optional, Type

from rich.console import Console
from rich.markup import escape
from rich.progress import (
    BarColumn, DownloadColumn, Progress, TextColumn, TimeRemainingColumn, TransferSpeedColumn
)

REFRESH_HZ = 5

def new_progress(console: Console) -> Progress:
    return Progress(
        TextColumn("{task.percentage:>3.0f}%", justify="right"),
        BarColumn(bar_width=60),
        DownloadColumn(),
        TransferSpeedColumn(),
        TimeRemainingColumn(),
        TextColumn("{task.description}"),
        console=console,
        refresh_per_second=REFRESH_HZ,
        transient=False,
    )


class ProgressTracker:
    def __init__(self, console: Console, message: str, total: Optional[int] = None) -> None:
        # total=None renders as an indeterminate (pulsing) bar
        self.progress = new_progress(console)
        self.task_id = self.progress.add_task(message, total=total)
        self.finished = False

    def __enter__(self) -> "ProgressTracker":
        self.progress.start()
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        if not self.finished:
            if exc is not None:
                self.abandon(f"Failed: {exc}")
            else:
                self.finish()
        self.progress.stop()

    @property
    def completed(self) -> int:
        return int(self.progress.tasks[0].completed)

    def advance(self, n: int) -> None:
        self.progress.advance(self.task_id, n)

    def set_message(self, message: str) -> None:
        self.progress.update(self.task_id, description=message)

    def finish(self, message: Optional[str] = None) -> None:
        if self.finished:
            return
        self.finished = True
        done = self.completed
        # pin an unknown total to what was actually transferred so the bar reads 100%
        self.progress.update(self.task_id, total=done, completed=done)
        if message is not None:
            self.set_message(message)

    def abandon(self, message: str) -> None:
        if self.finished:
            return
        self.finished = True
        self.set_message(f"[red]{escape(message)}[/]")

    def track(self, chunks: Iterable[bytes]) -> Iterator[bytes]:
        """Yield `chunks` unchanged, counting each one into the bar."""
        for chunk in chunks:
            self.advance(len(chunk))
            yield chunk

    def wrap(self, inner: BinaryIO) -> "ProgressReader":
        return ProgressReader(inner, self)


class ProgressReader:
    """File-like reader that counts bytes into a tracker and abandons it on read errors."""

    def __init__(self, inner: BinaryIO, tracker: ProgressTracker) -> None:
        self.inner = inner
        self.tracker = tracker

    def read(self, size: int = -1) -> bytes:
        try:
            data = self.inner.read(size)
        except OSError as e:
            self.tracker.abandon(f"Failed to read: {e}")
            raise
        self.tracker.advance(len(data))
        return data
