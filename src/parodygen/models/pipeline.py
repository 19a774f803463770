"""Pipeline run state and stage models."""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field


class RunStage(StrEnum):
    """Stages of a generation run."""

    IDLE = "idle"
    VALIDATING = "validating"
    CHECKING_PREREQUISITES = "checking_prerequisites"
    DOWNLOADING = "downloading"
    EXTRACTING = "extracting"
    MERGING = "merging"
    CLEANING_UP = "cleaning_up"
    DELIVERED = "delivered"
    FAILED = "failed"


class RunState(BaseModel):
    """Current state of a generation run."""

    run_id: str = Field(..., min_length=1)
    project_name: str = Field(default="")
    stage: RunStage = Field(default=RunStage.IDLE)
    progress: float = Field(default=0.0, ge=0, le=1)
    message: str = Field(default="")
    segment_count: int = Field(default=0, ge=0)
    started_at: datetime | None = None
    updated_at: datetime | None = None
    completed_at: datetime | None = None
    error: str | None = None
    failed_stage: RunStage | None = None
    output_path: str | None = None


class RunResult(BaseModel):
    """A delivered artifact."""

    run_id: str
    output_path: str = Field(..., description="Path to the merged audio file")
    filename: str = Field(..., description="Suggested download filename")
    segment_count: int = Field(..., ge=1)
    total_duration: int = Field(..., ge=0, description="Requested audio length in seconds")
    expires_at: datetime | None = None
