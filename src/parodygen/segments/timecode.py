"""Timecode parsing and formatting.

Timecodes are durations since zero written as ``HH:MM:SS``, ``MM:SS`` or ``SS``.
Minute and second groups above 59 are accepted; they simply carry over.
"""

import re

from parodygen.models.errors import FormatError, OrderError

_GROUP = re.compile(r"[0-9]+")


def parse_timecode(value: str) -> int:
    """Convert a timecode string to whole seconds."""
    if not isinstance(value, str):
        raise FormatError(f"Invalid time format: {value!r}", details={"value": repr(value)})

    parts = value.strip().split(":")
    if len(parts) > 3 or not all(_GROUP.fullmatch(p) for p in parts):
        raise FormatError(
            f"Invalid time format: {value!r}. Use HH:MM:SS, MM:SS, or SS",
            details={"value": value},
        )

    seconds = 0
    for part in parts:
        seconds = seconds * 60 + int(part)
    return seconds


def format_timecode(seconds: int) -> str:
    """Format whole seconds as canonical zero-padded HH:MM:SS."""
    if seconds < 0:
        raise FormatError(f"Cannot format negative duration: {seconds}")
    seconds = int(seconds)
    h, rem = divmod(seconds, 3600)
    m, s = divmod(rem, 60)
    return f"{h:02d}:{m:02d}:{s:02d}"


def is_valid_timecode(value: str) -> bool:
    try:
        parse_timecode(value)
    except FormatError:
        return False
    return True


def duration(start: str, end: str) -> int:
    """Seconds between two timecodes; end must come strictly after start."""
    start_seconds = parse_timecode(start)
    end_seconds = parse_timecode(end)
    if end_seconds <= start_seconds:
        raise OrderError(
            f"End time ({end}) must be after start time ({start})",
            details={"start": start, "end": end},
        )
    return end_seconds - start_seconds
