"""Media tool capabilities: download, extract range, concatenate."""

import logging
import shutil
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path

from parodygen.config import Settings, get_settings
from parodygen.models.errors import PrereqError, ToolError
from parodygen.tooling.commands import MediaCommandBuilder

logger = logging.getLogger(__name__)

_STDERR_TAIL_LINES = 30


class MediaToolkit(ABC):
    """Abstract interface over the external media tooling."""

    @abstractmethod
    def check_available(self) -> None:
        """Raise PrereqError unless download and transcode tools are reachable."""
        ...

    @abstractmethod
    def download(self, source_url: str, destination: Path) -> None:
        """Fetch the fixed-quality rendition of a source video to an exact path."""
        ...

    @abstractmethod
    def extract_range(
        self, source: Path, start_seconds: int, duration_seconds: int, destination: Path
    ) -> None:
        """Cut an audio-only range out of a video without re-encoding."""
        ...

    @abstractmethod
    def concatenate(self, manifest: Path, destination: Path) -> None:
        """Join the audio files listed in a manifest, in manifest order."""
        ...

    def is_available(self) -> bool:
        try:
            self.check_available()
            return True
        except PrereqError:
            return False


class CommandToolkit(MediaToolkit):
    """Runs yt-dlp and ffmpeg as subprocesses, locally or inside docker compose services."""

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()
        self.builder = MediaCommandBuilder(self.settings)

    @property
    def _cwd(self) -> Path | None:
        return self.settings.compose_dir if self.builder.in_docker else None

    def check_available(self) -> None:
        if self.builder.in_docker:
            self._check_services()
        else:
            self._check_binaries()

    def _check_binaries(self) -> None:
        missing = [
            b
            for b in (self.settings.ytdlp_binary, self.settings.ffmpeg_binary)
            if shutil.which(b) is None
        ]
        if missing:
            raise PrereqError(
                f"Media tools not found: {', '.join(missing)}. Please install yt-dlp and FFmpeg.",
                details={"missing": missing},
            )

    def _check_services(self) -> None:
        cmd = self.builder.services_command()
        try:
            result = subprocess.run(
                cmd, capture_output=True, text=True, timeout=30, cwd=self._cwd
            )
        except (FileNotFoundError, subprocess.TimeoutExpired) as e:
            raise PrereqError(
                "Docker containers are not running. Please run: docker compose up -d",
                details={"error": str(e)},
            )
        if result.returncode != 0:
            raise PrereqError(
                "Docker containers are not running. Please run: docker compose up -d",
                details={"stderr": result.stderr[-2000:]},
            )
        running = {line.strip() for line in result.stdout.splitlines() if line.strip()}
        missing = [
            s
            for s in (self.settings.ytdlp_service, self.settings.ffmpeg_service)
            if s not in running
        ]
        if missing:
            raise PrereqError(
                f"Docker services not running: {', '.join(missing)}",
                details={"missing": missing, "running": sorted(running)},
            )

    def download(self, source_url: str, destination: Path) -> None:
        self._run(self.builder.download_command(source_url, destination))

    def extract_range(
        self, source: Path, start_seconds: int, duration_seconds: int, destination: Path
    ) -> None:
        self._run(
            self.builder.extract_command(source, start_seconds, duration_seconds, destination)
        )

    def concatenate(self, manifest: Path, destination: Path) -> None:
        self._run(self.builder.concat_command(manifest, destination))

    def _run(self, cmd: list[str]) -> subprocess.CompletedProcess:
        logger.info("Executing: %s", " ".join(cmd))
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.settings.command_timeout_seconds,
                cwd=self._cwd,
            )
        except FileNotFoundError:
            raise ToolError(f"{cmd[0]} not found", details={"command": cmd})
        except subprocess.TimeoutExpired:
            raise ToolError(
                f"{cmd[0]} timed out after {self.settings.command_timeout_seconds:.0f}s",
                details={"command": cmd},
            )

        if result.returncode != 0:
            stderr_text = "".join(result.stderr.splitlines(keepends=True)[-_STDERR_TAIL_LINES:])
            logger.error("%s failed (code %d): %s", cmd[0], result.returncode, stderr_text)
            raise ToolError(
                f"{cmd[0]} exited with code {result.returncode}",
                details={"command": cmd, "returncode": result.returncode, "stderr": stderr_text},
            )
        return result
