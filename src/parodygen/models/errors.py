"""Error hierarchy and error response models."""

from pydantic import BaseModel, Field


class ParodyError(Exception):
    """Base error for all parody generator errors."""

    def __init__(self, message: str, component: str = "", details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.component = component
        self.details = details or {}


class PrereqError(ParodyError):
    """The download/transcode environment is not reachable."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, component="prerequisites", details=details)


class TimecodeError(ParodyError):
    """Bad timecode input."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, component="timecode", details=details)


class FormatError(TimecodeError):
    """Timecode string is not HH:MM:SS, MM:SS or SS."""


class OrderError(TimecodeError):
    """End timecode does not come after the start timecode."""


class ValidationError(ParodyError):
    """Request validation errors (segment count, URLs, times, total duration)."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, component="validation", details=details)


class ToolError(ParodyError):
    """An external media tool exited unsuccessfully or could not be run."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, component="tooling", details=details)


class DownloadError(ParodyError):
    """Errors while acquiring a source video."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, component="download", details=details)


class ExtractionError(ParodyError):
    """Errors while cutting an audio range out of a video."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, component="extraction", details=details)


class MergeError(ParodyError):
    """Errors while concatenating extracted audio segments."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, component="merge", details=details)


class CleanupError(ParodyError):
    """Errors while removing scratch files or expired artifacts. Logged, never surfaced."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, component="cleanup", details=details)


class ErrorResponse(BaseModel):
    """Standardized error response for API."""

    error: str = Field(..., description="Human-readable error message")
    error_type: str = Field(..., description="Error category")
    component: str = Field(default="", description="Component that raised the error")
    message: str = Field(..., description="Human-readable error message")
    details: dict = Field(default_factory=dict)
    actionable_guidance: str = Field(default="", description="Suggested user action")
    retry_possible: bool = Field(default=False)

    @classmethod
    def from_exception(
        cls, exc: ParodyError, guidance: str = "", retry: bool = False
    ) -> "ErrorResponse":
        return cls(
            error=exc.message,
            error_type=type(exc).__name__,
            component=exc.component,
            message=exc.message,
            details=exc.details,
            actionable_guidance=guidance,
            retry_possible=retry,
        )
