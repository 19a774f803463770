"""Pipeline manager: runs segment lists through download, extract and merge."""

import logging
import re
import threading
import uuid
from collections.abc import Callable, Sequence
from datetime import UTC, datetime, timedelta
from pathlib import Path

from parodygen.config import Settings, get_settings
from parodygen.models.errors import (
    DownloadError,
    ExtractionError,
    MergeError,
    ParodyError,
    PrereqError,
)
from parodygen.models.pipeline import RunResult, RunStage, RunState
from parodygen.models.segment import SegmentRequest
from parodygen.rendering.assembly import AudioAssembler
from parodygen.rendering.extraction import AudioExtractor
from parodygen.segments.validators import ensure_valid
from parodygen.storage.retention import RetentionScheduler
from parodygen.storage.temp_store import TempFileManager
from parodygen.storage.video_cache import VideoCache
from parodygen.tooling.toolkit import CommandToolkit, MediaToolkit

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[RunState], None]

_STAGE_ERRORS: dict[RunStage, type[ParodyError]] = {
    RunStage.DOWNLOADING: DownloadError,
    RunStage.EXTRACTING: ExtractionError,
    RunStage.MERGING: MergeError,
}
_MAX_TRACKED_RUNS = 500


def download_filename(project_name: str, ext: str, when: datetime | None = None) -> str:
    """Suggested download name: sanitized project name plus a millisecond timestamp."""
    when = when or datetime.now(UTC)
    stem = re.sub(r"[^A-Za-z0-9]", "_", project_name) or "parody"
    return f"{stem}_{int(when.timestamp() * 1000)}.{ext}"


class PipelineManager:
    """Manages generation runs.

    Each run is strictly sequential and aborts on the first failing segment.
    Separate runs may execute concurrently; they share the video cache and the
    output directory but never a scratch directory.
    """

    def __init__(
        self,
        toolkit: MediaToolkit | None = None,
        scheduler: RetentionScheduler | None = None,
        settings: Settings | None = None,
    ):
        self.settings = settings or get_settings()
        self.toolkit = toolkit or CommandToolkit(self.settings)
        self.scheduler = scheduler or RetentionScheduler(self.settings.output_retention_seconds)
        self.temp_store = TempFileManager(self.settings.temp_dir)
        self.cache = VideoCache(self.toolkit, self.settings.cache_dir, self.settings)
        self.extractor = AudioExtractor(self.toolkit)
        self.assembler = AudioAssembler(self.toolkit)
        self.output_dir = Path(self.settings.output_dir)
        self._runs: dict[str, RunState] = {}
        self._lock = threading.Lock()

    def check_prerequisites(self) -> None:
        """Raise PrereqError unless the media tools are reachable."""
        self.toolkit.check_available()

    def get_run_state(self, run_id: str) -> RunState | None:
        """Get current state of a run."""
        with self._lock:
            return self._runs.get(run_id)

    def create_run(self, project_name: str = "") -> RunState:
        run_id = str(uuid.uuid4())
        now = datetime.now(UTC)
        state = RunState(run_id=run_id, project_name=project_name, started_at=now, updated_at=now)
        with self._lock:
            if len(self._runs) >= _MAX_TRACKED_RUNS:
                finished = [rid for rid, s in self._runs.items() if s.completed_at is not None]
                for rid in finished[: len(finished) // 2 or 1]:
                    del self._runs[rid]
            self._runs[run_id] = state
        return state

    def generate(
        self,
        segments: Sequence[SegmentRequest],
        project_name: str = "",
        on_progress: ProgressCallback | None = None,
    ) -> RunResult:
        """Run the full pipeline and return the delivered artifact.

        Strict ordering: validate → prerequisites → download → extract → merge
        → clean up → schedule deletion.
        """
        state = self.create_run(project_name)
        run_id = state.run_id
        state.segment_count = len(segments)
        logger.info(
            "Starting generation for project: %s (%d segments)", project_name, len(segments)
        )

        self._update_state(run_id, RunStage.VALIDATING, 0.0, "Validating segments...", on_progress)
        try:
            validation = ensure_valid(segments, self.settings)
        except ParodyError as e:
            self._fail(run_id, RunStage.VALIDATING, e, on_progress)
            raise

        self._update_state(
            run_id, RunStage.CHECKING_PREREQUISITES, 0.05, "Checking media tools...", on_progress
        )
        try:
            self.check_prerequisites()
        except PrereqError as e:
            self._fail(run_id, RunStage.CHECKING_PREREQUISITES, e, on_progress)
            raise

        stage = RunStage.DOWNLOADING
        try:
            run_dir = self.temp_store.create_run_dir(run_id)

            # Stage 1: Download
            downloaded: list[tuple[Path, SegmentRequest]] = []
            for i, segment in enumerate(segments):
                self._update_state(
                    run_id,
                    stage,
                    0.1 + 0.4 * i / len(segments),
                    f"[{i + 1}/{len(segments)}] Downloading {segment.url}",
                    on_progress,
                )
                downloaded.append((self.cache.acquire(segment.url), segment))

            # Stage 2: Extract
            stage = RunStage.EXTRACTING
            audio_paths: list[Path] = []
            for i, (video_path, segment) in enumerate(downloaded):
                self._update_state(
                    run_id,
                    stage,
                    0.5 + 0.3 * i / len(downloaded),
                    f"[{i + 1}/{len(downloaded)}] Extracting audio...",
                    on_progress,
                )
                audio_path = run_dir / f"audio_segment_{i + 1}.{self.settings.audio_ext}"
                audio_paths.append(
                    self.extractor.extract(
                        video_path, segment.start_time, segment.end_time, audio_path
                    )
                )

            # Stage 3: Merge
            stage = RunStage.MERGING
            self._update_state(
                run_id, stage, 0.8, f"Merging {len(audio_paths)} audio segments...", on_progress
            )
            finished_at = datetime.now(UTC)
            output_path = self.output_dir / (
                f"{self.settings.output_prefix}_{int(finished_at.timestamp() * 1000)}"
                f"_{run_id[:8]}.{self.settings.audio_ext}"
            )
            self.assembler.merge(audio_paths, output_path, run_dir)

        except ParodyError as e:
            self._cleanup(run_id, on_progress)
            self._fail(run_id, stage, e, on_progress)
            raise
        except Exception as e:
            self._cleanup(run_id, on_progress)
            err = _STAGE_ERRORS[stage](f"Generation failed: {e}", details={"error": str(e)})
            self._fail(run_id, stage, err, on_progress)
            raise err from e

        self._cleanup(run_id, on_progress)

        # Deliver
        self.scheduler.schedule(output_path)
        result = RunResult(
            run_id=run_id,
            output_path=str(output_path),
            filename=download_filename(project_name, self.settings.audio_ext, finished_at),
            segment_count=len(segments),
            total_duration=validation.total_duration,
            expires_at=finished_at + timedelta(seconds=self.scheduler.retention_seconds),
        )
        self._update_state(run_id, RunStage.DELIVERED, 1.0, "Generation complete!", on_progress)
        with self._lock:
            state.output_path = result.output_path
            state.completed_at = datetime.now(UTC)
        return result

    def _cleanup(self, run_id: str, on_progress: ProgressCallback | None) -> None:
        self._update_state(
            run_id,
            RunStage.CLEANING_UP,
            message="Cleaning up temporary files...",
            on_progress=on_progress,
        )
        self.temp_store.cleanup_run(run_id)

    def _fail(
        self,
        run_id: str,
        stage: RunStage,
        exc: ParodyError,
        on_progress: ProgressCallback | None,
    ) -> None:
        exc.details.setdefault("stage", stage.value)
        exc.details.setdefault("run_id", run_id)
        logger.error("Generation failed during %s: %s", stage.value, exc.message)
        with self._lock:
            state = self._runs.get(run_id)
            if state is not None:
                state.failed_stage = stage
        self._update_state(run_id, RunStage.FAILED, message=exc.message, on_progress=on_progress)

    def _update_state(
        self,
        run_id: str,
        stage: RunStage,
        progress: float | None = None,
        message: str = "",
        on_progress: ProgressCallback | None = None,
    ):
        """Update run state."""
        with self._lock:
            state = self._runs.get(run_id)
            if state is None:
                return
            state.stage = stage
            if progress is not None:
                state.progress = progress
            state.message = message
            state.updated_at = datetime.now(UTC)
            if stage == RunStage.FAILED:
                state.error = message
                state.completed_at = state.updated_at
            snapshot = state.model_copy()
        if on_progress:
            on_progress(snapshot)

    def forget_run(self, run_id: str) -> None:
        """Drop bookkeeping for a finished run."""
        with self._lock:
            self._runs.pop(run_id, None)
