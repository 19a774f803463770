"""Dependency injection providers for FastAPI."""

from functools import lru_cache

from parodygen.config import Settings, get_settings
from parodygen.pipeline.manager import PipelineManager
from parodygen.storage.retention import RetentionScheduler


@lru_cache
def get_retention_scheduler() -> RetentionScheduler:
    return RetentionScheduler()


@lru_cache
def get_pipeline_manager() -> PipelineManager:
    return PipelineManager(scheduler=get_retention_scheduler())


def get_app_settings() -> Settings:
    return get_settings()
