"""Audio extraction stage: one time range out of one cached video."""

import logging
from pathlib import Path

from parodygen.models.errors import ExtractionError, TimecodeError, ToolError
from parodygen.segments.timecode import duration, parse_timecode
from parodygen.tooling.toolkit import MediaToolkit

logger = logging.getLogger(__name__)


class AudioExtractor:
    """Cuts an audio range from a video, copying the stream as-is."""

    def __init__(self, toolkit: MediaToolkit):
        self.toolkit = toolkit

    def extract(self, video_path: Path, start: str, end: str, output_path: Path) -> Path:
        try:
            length = duration(start, end)
            offset = parse_timecode(start)
        except TimecodeError as e:
            raise ExtractionError(
                f"Failed to extract audio: {e.message}",
                details={"video": str(video_path), "start": start, "end": end},
            )

        logger.info("Extracting audio segment: %s to %s", start, end)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            self.toolkit.extract_range(video_path, offset, length, output_path)
        except ToolError as e:
            raise ExtractionError(
                f"Failed to extract audio: {e.message}",
                details={"video": str(video_path), "start": start, "end": end, **e.details},
            )

        if not output_path.is_file():
            raise ExtractionError(
                "Audio extraction produced no file",
                details={"video": str(video_path), "output": str(output_path)},
            )
        return output_path
