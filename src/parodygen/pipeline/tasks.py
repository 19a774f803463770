"""Celery task definitions for periodic maintenance."""

from celery import Celery

from parodygen.config import get_settings
from parodygen.storage.retention import sweep_expired
from parodygen.storage.temp_store import TempFileManager
from parodygen.storage.video_cache import VideoCache
from parodygen.tooling.toolkit import CommandToolkit

settings = get_settings()

celery_app = Celery(
    "parodygen",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
)
celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    beat_schedule={
        "sweep-outputs": {
            "task": "parodygen.sweep_outputs",
            "schedule": float(settings.sweep_interval_seconds),
        },
        "sweep-temp": {
            "task": "parodygen.sweep_temp",
            "schedule": float(settings.sweep_interval_seconds),
        },
        "sweep-cache": {
            "task": "parodygen.sweep_cache",
            "schedule": 24 * 60 * 60.0,
        },
    },
)


@celery_app.task(name="parodygen.sweep_outputs")
def sweep_outputs_task(max_age_seconds: int | None = None) -> dict:
    """Delete generated artifacts older than the retention window."""
    current = get_settings()
    max_age = max_age_seconds or current.output_retention_seconds
    removed = sweep_expired(current.output_dir, max_age)
    return {"directory": str(current.output_dir), "removed": removed}


@celery_app.task(name="parodygen.sweep_temp")
def sweep_temp_task(ttl_seconds: int | None = None) -> dict:
    """Delete scratch directories abandoned by crashed runs."""
    current = get_settings()
    removed = TempFileManager(current.temp_dir).cleanup_expired(ttl_seconds)
    return {"directory": str(current.temp_dir), "removed": removed}


@celery_app.task(name="parodygen.sweep_cache")
def sweep_cache_task(max_age_seconds: int | None = None) -> dict:
    """Age-based pruning of the downloaded video cache."""
    current = get_settings()
    cache = VideoCache(CommandToolkit(current), current.cache_dir, current)
    removed = cache.sweep(max_age_seconds)
    return {"directory": str(cache.cache_dir), "removed": removed}
