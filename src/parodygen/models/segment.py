"""Segment request and validation result models."""

from pydantic import BaseModel, ConfigDict, Field


class SegmentRequest(BaseModel):
    """One (source, start, end) range of audio to cut out of a video."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str | None = Field(default=None, description="Caller-side segment identifier")
    url: str = Field(..., description="Source video URL")
    start_time: str = Field(..., alias="startTime", description="HH:MM:SS, MM:SS or SS")
    end_time: str = Field(..., alias="endTime", description="HH:MM:SS, MM:SS or SS")


class GenerateRequest(BaseModel):
    """A generation request: an ordered segment list plus a display name."""

    model_config = ConfigDict(populate_by_name=True)

    project_name: str = Field(default="", alias="projectName")
    segments: list[SegmentRequest] = Field(default_factory=list)


class ValidationResult(BaseModel):
    """Aggregate validation outcome for a segment list."""

    is_valid: bool
    global_errors: list[str] = Field(default_factory=list)
    segment_errors: dict[str, list[str]] = Field(default_factory=dict)
    total_duration: int = Field(default=0, ge=0, description="Sum of valid segment durations")
