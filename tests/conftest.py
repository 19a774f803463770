"""Shared test fixtures and a fake media toolkit."""

from pathlib import Path

import pytest

from parodygen.config import Settings
from parodygen.models.errors import PrereqError, ToolError
from parodygen.models.segment import SegmentRequest
from parodygen.pipeline.manager import PipelineManager
from parodygen.storage.retention import RetentionScheduler
from parodygen.tooling.toolkit import MediaToolkit

URL_A = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"
URL_B = "https://youtu.be/9bZkp7q19f0"
URL_C = "https://www.youtube.com/embed/kJQP7kiw5Fk"

DAY = 24 * 60 * 60


class FakeToolkit(MediaToolkit):
    """Stands in for yt-dlp/ffmpeg by writing small text files.

    Extracted segments contain ``<video name> <start>+<duration>`` and the
    merged file is the concatenation of the manifest's files in order.
    """

    def __init__(self):
        self.available = True
        self.calls: list[tuple] = []
        self.fail_download: set[str] = set()
        self.fail_extract_at: int | None = None
        self.fail_concat = False
        self.extract_count = 0

    def check_available(self) -> None:
        self.calls.append(("check",))
        if not self.available:
            raise PrereqError("Docker containers are not running. Please run: docker compose up -d")

    def download(self, source_url: str, destination: Path) -> None:
        self.calls.append(("download", source_url))
        if source_url in self.fail_download:
            raise ToolError(
                "yt-dlp exited with code 1",
                details={"returncode": 1, "stderr": "ERROR: Video unavailable"},
            )
        destination.write_text(f"video {source_url}\n")

    def extract_range(
        self, source: Path, start_seconds: int, duration_seconds: int, destination: Path
    ) -> None:
        self.extract_count += 1
        self.calls.append(("extract", source.name, start_seconds, duration_seconds))
        if self.fail_extract_at == self.extract_count:
            raise ToolError(
                "ffmpeg exited with code 1",
                details={"returncode": 1, "stderr": "Invalid data found when processing input"},
            )
        destination.write_text(f"{source.name} {start_seconds}+{duration_seconds}\n")

    def concatenate(self, manifest: Path, destination: Path) -> None:
        self.calls.append(("concat", manifest.name))
        if self.fail_concat:
            raise ToolError("ffmpeg exited with code 1", details={"stderr": "concat failed"})
        parts = []
        for line in manifest.read_text().splitlines():
            name = line[len("file '") : -1].replace("'\\''", "'")
            parts.append((manifest.parent / name).read_text())
        destination.write_text("".join(parts))

    def names(self) -> list[str]:
        return [c[0] for c in self.calls]


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_segment(url: str = URL_A, start: str = "00:00:00", end: str = "00:00:10", **kw):
    return SegmentRequest(url=url, start_time=start, end_time=end, **kw)


@pytest.fixture
def settings(tmp_path):
    media = tmp_path / "media"
    return Settings(
        media_dir=media,
        cache_dir=media / ".youtube_cache",
        temp_dir=media / ".temp_segments",
        output_dir=media / "output",
    )


@pytest.fixture
def toolkit():
    return FakeToolkit()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def scheduler(clock):
    return RetentionScheduler(retention_seconds=DAY, clock=clock)


@pytest.fixture
def manager(toolkit, scheduler, settings):
    return PipelineManager(toolkit=toolkit, scheduler=scheduler, settings=settings)
