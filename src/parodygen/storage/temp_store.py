"""Per-run scratch directory lifecycle."""

import logging
import shutil
import threading
import time
from pathlib import Path

from parodygen.config import get_settings
from parodygen.models.errors import CleanupError

logger = logging.getLogger(__name__)


class TempFileManager:
    """Manages run-unique temporary directories.

    Cleanup is best-effort: failures are logged as CleanupError and never raised,
    and only the named run's directory is ever touched.
    """

    def __init__(self, base_dir: Path | None = None):
        self.base_dir = base_dir or get_settings().temp_dir
        self.base_dir.mkdir(parents=True, exist_ok=True)
        self._run_dirs: dict[str, tuple[Path, float]] = {}
        self._lock = threading.Lock()

    def create_run_dir(self, run_id: str) -> Path:
        """Create a temporary directory for a run."""
        run_dir = self.base_dir / run_id
        run_dir.mkdir(parents=True, exist_ok=True)
        with self._lock:
            self._run_dirs[run_id] = (run_dir, time.time())
        return run_dir

    def get_run_dir(self, run_id: str) -> Path | None:
        """Get the temporary directory for a run."""
        with self._lock:
            if run_id in self._run_dirs:
                return self._run_dirs[run_id][0]
        run_dir = self.base_dir / run_id
        if run_dir.exists():
            return run_dir
        return None

    def cleanup_run(self, run_id: str) -> bool:
        """Remove a run's scratch files. Returns False if removal failed."""
        with self._lock:
            entry = self._run_dirs.pop(run_id, None)
        run_dir = entry[0] if entry else self.base_dir / run_id
        if not run_dir.exists():
            return True
        try:
            shutil.rmtree(run_dir)
        except OSError as e:
            err = CleanupError(
                f"Failed to clean temp files for run {run_id}", details={"error": str(e)}
            )
            logger.error("%s: %s", err.message, e)
            return False
        logger.info(f"Cleaned up temp files for run {run_id}")
        return True

    def cleanup_expired(self, ttl_seconds: int | None = None) -> int:
        """Clean up run directories older than the TTL, including ones left by a restart."""
        ttl = ttl_seconds or get_settings().temp_file_ttl_seconds
        now = time.time()
        cleaned = 0
        with self._lock:
            tracked = dict(self._run_dirs)
        expired = [run_id for run_id, (_, created) in tracked.items() if now - created > ttl]
        for run_dir in self.base_dir.iterdir():
            if not run_dir.is_dir() or run_dir.name in tracked:
                continue
            try:
                if now - run_dir.stat().st_mtime > ttl:
                    expired.append(run_dir.name)
            except OSError:
                continue
        for run_id in expired:
            if self.cleanup_run(run_id):
                cleaned += 1
        return cleaned
