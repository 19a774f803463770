"""Tests for the periodic maintenance tasks."""

import os
import time

import pytest

from parodygen.pipeline.tasks import (
    celery_app,
    sweep_cache_task,
    sweep_outputs_task,
    sweep_temp_task,
)
from tests.conftest import DAY


@pytest.fixture
def media_env(tmp_path, monkeypatch):
    media = tmp_path / "media"
    dirs = {
        "output": media / "output",
        "temp": media / ".temp_segments",
        "cache": media / ".youtube_cache",
    }
    for d in dirs.values():
        d.mkdir(parents=True)
    monkeypatch.setenv("PARODYGEN_MEDIA_DIR", str(media))
    monkeypatch.setenv("PARODYGEN_OUTPUT_DIR", str(dirs["output"]))
    monkeypatch.setenv("PARODYGEN_TEMP_DIR", str(dirs["temp"]))
    monkeypatch.setenv("PARODYGEN_CACHE_DIR", str(dirs["cache"]))
    return dirs


def _age(path, seconds):
    old = time.time() - seconds
    os.utime(path, (old, old))


class TestMaintenanceTasks:
    def test_registered(self):
        assert "parodygen.sweep_outputs" in celery_app.tasks
        assert "parodygen.sweep_cache" in celery_app.tasks
        assert "sweep-outputs" in celery_app.conf.beat_schedule

    def test_sweep_outputs(self, media_env):
        old = media_env["output"] / "parody_1.m4a"
        new = media_env["output"] / "parody_2.m4a"
        old.write_text("x")
        new.write_text("x")
        _age(old, DAY + 60)

        result = sweep_outputs_task()
        assert result["removed"] == 1
        assert not old.exists()
        assert new.exists()

    def test_sweep_temp(self, media_env):
        orphan = media_env["temp"] / "crashed-run"
        orphan.mkdir()
        _age(orphan, 2 * 60 * 60)
        assert sweep_temp_task()["removed"] == 1
        assert not orphan.exists()

    def test_sweep_cache(self, media_env):
        video = media_env["cache"] / "dQw4w9WgXcQ.360p.mp4"
        video.write_text("x")
        _age(video, 2 * DAY)
        assert sweep_cache_task(max_age_seconds=DAY)["removed"] == 1
        assert not video.exists()
