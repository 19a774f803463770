"""Audio assembly stage: concatenate extracted segments in request order."""

import logging
import os
import shutil
from collections.abc import Sequence
from pathlib import Path

from parodygen.models.errors import MergeError, ToolError
from parodygen.tooling.toolkit import MediaToolkit

logger = logging.getLogger(__name__)

MANIFEST_NAME = "concat_list.txt"


class AudioAssembler:
    """Merges audio files with the concat demuxer (no re-encode)."""

    def __init__(self, toolkit: MediaToolkit):
        self.toolkit = toolkit

    @staticmethod
    def build_manifest(audio_paths: Sequence[Path]) -> str:
        """Concat list naming each file relative to the manifest, in the given order."""
        lines = []
        for path in audio_paths:
            name = Path(path).name.replace("'", "'\\''")
            lines.append(f"file '{name}'")
        return "\n".join(lines) + "\n"

    def merge(self, audio_paths: Sequence[Path], output_path: Path, work_dir: Path) -> Path:
        """Concatenate ``audio_paths`` into ``output_path``.

        The merged file is written inside ``work_dir`` first and moved to
        ``output_path`` only once the tool succeeds.
        """
        if not audio_paths:
            raise MergeError("No audio segments to merge")

        for path in audio_paths:
            if Path(path).parent != work_dir:
                raise MergeError(
                    f"Audio segment {path} is not inside the work directory",
                    details={"path": str(path), "work_dir": str(work_dir)},
                )

        logger.info("Merging %d audio segments...", len(audio_paths))
        manifest = work_dir / MANIFEST_NAME
        manifest.write_text(self.build_manifest(audio_paths))

        scratch = work_dir / f"merged{output_path.suffix}"
        try:
            self.toolkit.concatenate(manifest, scratch)
        except ToolError as e:
            raise MergeError(f"Failed to merge audio: {e.message}", details=e.details)

        if not scratch.is_file():
            raise MergeError("Merge produced no file", details={"output": str(output_path)})

        output_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            os.replace(scratch, output_path)
        except OSError:
            # Different filesystem: copy next to the target, then rename into place.
            staging = output_path.with_name(f".{output_path.name}.partial")
            try:
                shutil.copyfile(scratch, staging)
                os.replace(staging, output_path)
            except OSError as e:
                staging.unlink(missing_ok=True)
                raise MergeError(
                    f"Failed to publish merged audio: {e}",
                    details={"output": str(output_path)},
                )
        logger.info("Merged all audio segments into %s", output_path.name)
        return output_path
