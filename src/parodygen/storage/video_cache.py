"""Long-lived cache of downloaded source videos."""

import logging
import os
import threading
import uuid
from pathlib import Path

from parodygen.config import Settings, get_settings
from parodygen.models.errors import DownloadError, ToolError
from parodygen.segments.sources import get_video_id
from parodygen.storage.retention import sweep_expired
from parodygen.tooling.toolkit import MediaToolkit

logger = logging.getLogger(__name__)


class VideoCache:
    """Maps a video id to a local file at a fixed quality, downloading on miss.

    Downloads land on a unique partial name and are renamed into place only
    once complete, so a cached path never points at a half-written file.
    Concurrent misses for the same key in this process share one download.
    """

    def __init__(
        self,
        toolkit: MediaToolkit,
        cache_dir: Path | None = None,
        settings: Settings | None = None,
    ):
        self.settings = settings or get_settings()
        self.toolkit = toolkit
        self.cache_dir = cache_dir or self.settings.cache_dir
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def cache_path(self, key: str) -> Path:
        return self.cache_dir / f"{key}.{self.settings.video_quality}.{self.settings.video_ext}"

    def _key_lock(self, key: str) -> threading.Lock:
        with self._locks_guard:
            return self._locks.setdefault(key, threading.Lock())

    def acquire(self, source_url: str) -> Path:
        """Return the local path of a source video, downloading it if needed."""
        key = get_video_id(source_url)
        if not key:
            raise DownloadError("invalid source", details={"url": source_url})

        path = self.cache_path(key)
        if path.is_file():
            logger.info("Video %s already in cache", key)
            return path

        with self._key_lock(key):
            if path.is_file():
                logger.info("Video %s downloaded by a concurrent run", key)
                return path
            self._download(key, source_url, path)
        return path

    def _download(self, key: str, source_url: str, path: Path) -> None:
        partial = path.with_name(f"{key}.{uuid.uuid4().hex[:8]}.part.{self.settings.video_ext}")
        logger.info("Downloading video %s...", key)
        try:
            self.toolkit.download(source_url, partial)
        except ToolError as e:
            self._discard(partial)
            raise DownloadError(
                f"Failed to download {source_url}: {e.message}",
                details={"url": source_url, "key": key, **e.details},
            )

        if not partial.is_file():
            raise DownloadError(
                f"Download of {source_url} reported success but produced no file",
                details={"url": source_url, "key": key},
            )
        os.replace(partial, path)
        logger.info("Downloaded %s", key)

    def _discard(self, partial: Path) -> None:
        for leftover in partial.parent.glob(f"{partial.name}*"):
            try:
                leftover.unlink()
            except OSError as e:
                logger.warning("Could not remove partial download %s: %s", leftover, e)

    def sweep(self, max_age_seconds: int | None = None, now: float | None = None) -> int:
        """Delete cached videos not modified within the age window."""
        return sweep_expired(
            self.cache_dir, max_age_seconds or self.settings.cache_max_age_seconds, now
        )
