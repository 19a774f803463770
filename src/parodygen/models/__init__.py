"""Data models for the parody generator."""

from parodygen.models.errors import (
    CleanupError,
    DownloadError,
    ErrorResponse,
    ExtractionError,
    FormatError,
    MergeError,
    OrderError,
    ParodyError,
    PrereqError,
    TimecodeError,
    ToolError,
    ValidationError,
)
from parodygen.models.pipeline import RunResult, RunStage, RunState
from parodygen.models.segment import GenerateRequest, SegmentRequest, ValidationResult

__all__ = [
    "CleanupError",
    "DownloadError",
    "ErrorResponse",
    "ExtractionError",
    "FormatError",
    "GenerateRequest",
    "MergeError",
    "OrderError",
    "ParodyError",
    "PrereqError",
    "RunResult",
    "RunStage",
    "RunState",
    "SegmentRequest",
    "TimecodeError",
    "ToolError",
    "ValidationError",
    "ValidationResult",
]
