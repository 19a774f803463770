"""Error handling middleware."""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from parodygen.models.errors import (
    DownloadError,
    ErrorResponse,
    ExtractionError,
    ParodyError,
    PrereqError,
    ValidationError,
)

logger = logging.getLogger(__name__)


async def parody_error_handler(request: Request, exc: ParodyError) -> JSONResponse:
    """Handle ParodyError exceptions."""
    response = ErrorResponse.from_exception(
        exc, guidance=_get_guidance(exc), retry=_is_retryable(exc)
    )
    status_code = _get_status_code(exc)
    if status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=status_code, content=response.model_dump())


def _get_status_code(exc: ParodyError) -> int:
    """Map error type to HTTP status code."""
    if isinstance(exc, ValidationError):
        return 400
    elif isinstance(exc, PrereqError):
        return 503
    return 500


def _get_guidance(exc: ParodyError) -> str:
    """Generate actionable guidance based on error type."""
    if isinstance(exc, ValidationError):
        return "Check segment URLs, time formats, segment count and total duration."
    if isinstance(exc, PrereqError):
        return "Start the media tool containers (docker compose up -d) and try again."
    if isinstance(exc, DownloadError):
        return "Check that every video is public and the URL is correct."
    if isinstance(exc, ExtractionError):
        return "Check that each segment lies within its video's length."
    return "Please try again or contact support."


def _is_retryable(exc: ParodyError) -> bool:
    """Determine if the error is retryable."""
    return isinstance(exc, (PrereqError, DownloadError))
