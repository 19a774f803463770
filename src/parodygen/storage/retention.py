"""Deferred deletion of generated artifacts.

Artifacts are registered with a due time in a process-wide min-heap; a daemon
thread wakes at the earliest due time and deletes whatever has expired. The
schedule lives in memory only, so pending deletions are lost on restart;
``sweep_expired`` covers that gap with an age-based pass over a directory.
"""

import heapq
import itertools
import logging
import shutil
import threading
import time
from collections.abc import Callable
from pathlib import Path

from parodygen.config import get_settings
from parodygen.models.errors import CleanupError

logger = logging.getLogger(__name__)


def _remove(path: Path) -> bool:
    """Delete a file or directory tree; log and return False on failure."""
    try:
        if path.is_dir():
            shutil.rmtree(path)
        else:
            path.unlink(missing_ok=True)
    except OSError as e:
        err = CleanupError(f"Failed to cleanup {path}", details={"error": str(e)})
        logger.error("%s: %s", err.message, e)
        return False
    return True


class RetentionScheduler:
    """Deletes registered paths once their retention window has elapsed."""

    def __init__(
        self,
        retention_seconds: float | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self.retention_seconds = (
            retention_seconds
            if retention_seconds is not None
            else get_settings().output_retention_seconds
        )
        self.clock = clock
        self._heap: list[tuple[float, int, Path]] = []
        self._counter = itertools.count()
        self._cond = threading.Condition()
        self._thread: threading.Thread | None = None
        self._stopping = False

    def schedule(self, path: Path, delay: float | None = None) -> float:
        """Register ``path`` for deletion after ``delay`` seconds. Returns the due time."""
        delay = self.retention_seconds if delay is None else delay
        due = self.clock() + delay
        with self._cond:
            heapq.heappush(self._heap, (due, next(self._counter), Path(path)))
            self._cond.notify()
        logger.info("Scheduled cleanup for %s in %.0fs", Path(path).name, delay)
        return due

    def cancel(self, path: Path) -> bool:
        path = Path(path)
        with self._cond:
            kept = [entry for entry in self._heap if entry[2] != path]
            removed = len(kept) != len(self._heap)
            if removed:
                heapq.heapify(kept)
                self._heap = kept
                self._cond.notify()
        return removed

    def pending(self) -> list[tuple[Path, float]]:
        """Registered paths with their due times, earliest first."""
        with self._cond:
            return [(path, due) for due, _, path in sorted(self._heap)]

    def _pop_due(self, now: float) -> list[Path]:
        due_paths = []
        while self._heap and self._heap[0][0] <= now:
            due_paths.append(heapq.heappop(self._heap)[2])
        return due_paths

    def run_due(self, now: float | None = None) -> list[Path]:
        """Delete every path whose due time has passed. Returns the paths handled."""
        now = self.clock() if now is None else now
        with self._cond:
            due_paths = self._pop_due(now)
        for path in due_paths:
            if _remove(path):
                logger.info("Cleaned up: %s", path)
        return due_paths

    def start(self) -> None:
        with self._cond:
            if self._thread is not None and self._thread.is_alive():
                return
            self._stopping = False
            self._thread = threading.Thread(
                target=self._loop, name="retention-scheduler", daemon=True
            )
            self._thread.start()

    def shutdown(self, timeout: float | None = 5.0) -> None:
        with self._cond:
            self._stopping = True
            self._cond.notify()
            thread = self._thread
            self._thread = None
        if thread is not None:
            thread.join(timeout)

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def _loop(self) -> None:
        while True:
            with self._cond:
                if self._stopping:
                    return
                if self._heap:
                    wait = self._heap[0][0] - self.clock()
                    if wait > 0:
                        self._cond.wait(timeout=wait)
                        continue
                else:
                    self._cond.wait()
                    continue
                if self._stopping:
                    return
            self.run_due()


def sweep_expired(directory: Path, max_age_seconds: float, now: float | None = None) -> int:
    """Delete entries in ``directory`` whose mtime is older than ``max_age_seconds``."""
    if not directory.is_dir():
        return 0
    now = time.time() if now is None else now
    removed = 0
    for entry in directory.iterdir():
        try:
            age = now - entry.stat().st_mtime
        except OSError as e:
            logger.error("Error inspecting %s: %s", entry, e)
            continue
        if age > max_age_seconds and _remove(entry):
            logger.info("Cleaned up old file: %s", entry.name)
            removed += 1
    return removed
