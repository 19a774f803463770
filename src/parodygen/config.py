"""Application configuration using Pydantic BaseSettings."""

from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Parody generator configuration loaded from environment variables."""

    model_config = {"env_prefix": "PARODYGEN_", "env_file": ".env", "extra": "ignore"}

    # Redis / Celery
    celery_broker_url: str = "redis://localhost:6379/0"
    celery_result_backend: str = "redis://localhost:6379/1"

    # Segment limits
    min_segments: int = 1
    max_segments: int = 10
    min_segment_duration: int = 1
    max_total_duration: int = 20 * 60

    # Directories
    media_dir: Path = Path("/tmp/parodygen/media")
    cache_dir: Path = Path("/tmp/parodygen/media/.youtube_cache")
    temp_dir: Path = Path("/tmp/parodygen/media/.temp_segments")
    output_dir: Path = Path("/tmp/parodygen/media/output")

    # Source video rendition
    video_format: str = "18"
    video_quality: str = "360p"
    video_ext: str = "mp4"

    # Output
    audio_ext: str = "m4a"
    audio_media_type: str = "audio/mp4"
    output_prefix: str = "parody"
    output_retention_seconds: int = 24 * 60 * 60

    # Tool execution
    exec_mode: Literal["local", "docker"] = "local"
    ytdlp_binary: str = "yt-dlp"
    ffmpeg_binary: str = "ffmpeg"
    compose_dir: Path | None = None
    ytdlp_service: str = "ytdlp"
    ffmpeg_service: str = "ffmpeg"
    container_workdir: str = "/workdir"
    command_timeout_seconds: float = 600.0

    # Maintenance
    temp_file_ttl_seconds: int = 60 * 60
    cache_max_age_seconds: int = 30 * 24 * 60 * 60
    sweep_interval_seconds: int = 60 * 60


def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
