"""Tests for the source video cache."""

import os
import threading
import time

import pytest

from parodygen.models.errors import DownloadError
from parodygen.storage.video_cache import VideoCache
from tests.conftest import DAY, URL_A, URL_B, FakeToolkit


@pytest.fixture
def cache(toolkit, settings):
    return VideoCache(toolkit, settings.cache_dir, settings)


class TestVideoCache:
    def test_cache_path_layout(self, cache, settings):
        assert cache.cache_path("dQw4w9WgXcQ") == settings.cache_dir / "dQw4w9WgXcQ.360p.mp4"

    def test_miss_downloads(self, cache, toolkit):
        path = cache.acquire(URL_A)
        assert path.name == "dQw4w9WgXcQ.360p.mp4"
        assert path.read_text() == f"video {URL_A}\n"
        assert toolkit.calls == [("download", URL_A)]

    def test_hit_skips_download(self, cache, toolkit):
        first = cache.acquire(URL_A)
        second = cache.acquire("https://youtu.be/dQw4w9WgXcQ")
        assert first == second
        assert toolkit.names() == ["download"]

    def test_existing_file_is_trusted(self, cache, toolkit):
        path = cache.cache_path("dQw4w9WgXcQ")
        path.write_text("anything")
        assert cache.acquire(URL_A) == path
        assert toolkit.calls == []

    def test_invalid_source(self, cache, toolkit):
        with pytest.raises(DownloadError, match="invalid source"):
            cache.acquire("https://example.com/watch")
        assert toolkit.calls == []

    def test_path_like_source_rejected(self, cache, toolkit, settings):
        with pytest.raises(DownloadError, match="invalid source"):
            cache.acquire("https://youtu.be/../../x1234")
        assert toolkit.calls == []
        assert not (settings.cache_dir.parent.parent / "x1234.360p.mp4").exists()

    def test_failure_leaves_no_cached_file(self, cache, toolkit, settings):
        toolkit.fail_download.add(URL_B)
        with pytest.raises(DownloadError) as exc_info:
            cache.acquire(URL_B)
        assert "Video unavailable" in exc_info.value.details["stderr"]
        assert list(settings.cache_dir.iterdir()) == []

    def test_success_without_file(self, settings):
        class SilentToolkit(FakeToolkit):
            def download(self, source_url, destination):
                self.calls.append(("download", source_url))

        cache = VideoCache(SilentToolkit(), settings.cache_dir, settings)
        with pytest.raises(DownloadError, match="produced no file"):
            cache.acquire(URL_A)

    def test_concurrent_misses_download_once(self, settings):
        started = threading.Event()
        release = threading.Event()

        class SlowToolkit(FakeToolkit):
            def download(self, source_url, destination):
                started.set()
                release.wait(5)
                super().download(source_url, destination)

        kit = SlowToolkit()
        cache = VideoCache(kit, settings.cache_dir, settings)
        results = []

        def worker():
            results.append(cache.acquire(URL_A))

        first = threading.Thread(target=worker)
        first.start()
        assert started.wait(5)
        second = threading.Thread(target=worker)
        second.start()
        time.sleep(0.05)
        # Nothing is visible under the cache name while the download is in flight.
        assert not cache.cache_path("dQw4w9WgXcQ").exists()
        release.set()
        first.join(5)
        second.join(5)

        assert kit.names() == ["download"]
        assert len(results) == 2
        assert results[0] == results[1]
        assert results[0].read_text() == f"video {URL_A}\n"

    def test_sweep_removes_old_entries(self, cache, settings):
        old = cache.acquire(URL_A)
        fresh = cache.acquire(URL_B)
        now = fresh.stat().st_mtime + 10
        os.utime(old, (now - 2 * DAY, now - 2 * DAY))
        assert cache.sweep(max_age_seconds=DAY, now=now) == 1
        assert not old.exists()
        assert fresh.exists()
