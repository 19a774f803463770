"""Segment and request validation."""

from collections.abc import Sequence

from parodygen.config import Settings, get_settings
from parodygen.models.errors import FormatError, ValidationError
from parodygen.models.segment import SegmentRequest, ValidationResult
from parodygen.segments.sources import is_valid_source_url
from parodygen.segments.timecode import parse_timecode


def _try_parse(value: str) -> int | None:
    try:
        return parse_timecode(value)
    except FormatError:
        return None


def segment_key(segment: SegmentRequest, index: int) -> str:
    """Key used for per-segment errors: the caller's id, else the position."""
    return segment.id or str(index)


def segment_keys(segments: Sequence[SegmentRequest]) -> list[str]:
    """Per-segment error keys, falling back to positions when caller ids collide."""
    keys = [segment_key(s, i) for i, s in enumerate(segments)]
    if len(set(keys)) != len(keys):
        return [str(i) for i in range(len(segments))]
    return keys


def segment_duration(segment: SegmentRequest) -> int | None:
    """Duration in seconds of a well-formed segment, else None."""
    start = _try_parse(segment.start_time)
    end = _try_parse(segment.end_time)
    if start is None or end is None or end <= start:
        return None
    return end - start


def validate_segment(segment: SegmentRequest, min_duration: int | None = None) -> list[str]:
    """Collect every problem with one segment."""
    min_duration = min_duration if min_duration is not None else get_settings().min_segment_duration
    errors: list[str] = []

    if not is_valid_source_url(segment.url):
        errors.append("Invalid source URL")

    start = _try_parse(segment.start_time)
    end = _try_parse(segment.end_time)
    if start is None:
        errors.append("Invalid start time format. Use HH:MM:SS, MM:SS, or SS")
    if end is None:
        errors.append("Invalid end time format. Use HH:MM:SS, MM:SS, or SS")

    if start is not None and end is not None:
        if start >= end:
            errors.append("start must precede end")
        if end - start < min_duration:
            errors.append("segment too short")

    return errors


def validate_segments(
    segments: Sequence[SegmentRequest], settings: Settings | None = None
) -> ValidationResult:
    """Validate a whole request: every segment, the count and the total duration."""
    settings = settings or get_settings()
    global_errors: list[str] = []
    segment_errors: dict[str, list[str]] = {}

    if len(segments) < settings.min_segments:
        global_errors.append(f"need at least {settings.min_segments} segment")
    if len(segments) > settings.max_segments:
        global_errors.append(f"maximum {settings.max_segments} segments")

    total = 0
    keys = segment_keys(segments)
    for index, segment in enumerate(segments):
        errors = validate_segment(segment, settings.min_segment_duration)
        if errors:
            segment_errors[keys[index]] = errors
            continue
        total += segment_duration(segment) or 0

    if total > settings.max_total_duration:
        global_errors.append(f"exceeds {settings.max_total_duration // 60} minute limit")

    return ValidationResult(
        is_valid=not global_errors and not segment_errors,
        global_errors=global_errors,
        segment_errors=segment_errors,
        total_duration=total,
    )


def ensure_valid(
    segments: Sequence[SegmentRequest], settings: Settings | None = None
) -> ValidationResult:
    """Validate and raise ValidationError unless the request is runnable."""
    result = validate_segments(segments, settings)
    if not result.is_valid:
        problems = list(result.global_errors)
        for key, errors in result.segment_errors.items():
            problems.extend(f"segment {key}: {e}" for e in errors)
        raise ValidationError(
            "Invalid segments: " + "; ".join(problems),
            details=result.model_dump(),
        )
    return result
