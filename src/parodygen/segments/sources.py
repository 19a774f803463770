"""YouTube link parsing."""

import re

_VIDEO_ID_PATTERN = re.compile(r"^.*(youtu\.be/|v/|u/\w/|embed/|watch\?v=|&v=)([^#&?]*).*")
_VIDEO_ID = re.compile(r"[A-Za-z0-9_-]{11}")


def get_video_id(url: str) -> str | None:
    """Extract the 11-character video id from a YouTube URL, or None.

    The id doubles as a cache file name, so anything outside the YouTube id
    alphabet is rejected.
    """
    if not url:
        return None
    match = _VIDEO_ID_PATTERN.match(url)
    if match and _VIDEO_ID.fullmatch(match.group(2)):
        return match.group(2)
    return None


def is_valid_source_url(url: str) -> bool:
    return get_video_id(url) is not None


def thumbnail_url(video_id: str) -> str:
    return f"https://i.ytimg.com/vi/{video_id}/mqdefault.jpg"
