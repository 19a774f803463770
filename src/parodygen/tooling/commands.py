"""Command line construction for yt-dlp and ffmpeg."""

from pathlib import Path

from parodygen.config import Settings, get_settings


class MediaCommandBuilder:
    """Builds argument lists for the media tools.

    In docker mode every host path under ``media_dir`` is rewritten to the
    matching path under the container workdir, and the command is wrapped in
    ``docker compose exec``.
    """

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()

    @property
    def in_docker(self) -> bool:
        return self.settings.exec_mode == "docker"

    def tool_path(self, path: Path) -> str:
        """Path as seen by the tool process."""
        if not self.in_docker:
            return str(path)
        try:
            relative = Path(path).resolve().relative_to(self.settings.media_dir.resolve())
        except ValueError:
            return str(path)
        return f"{self.settings.container_workdir.rstrip('/')}/{relative.as_posix()}"

    def _wrap(self, service: str, args: list[str]) -> list[str]:
        if self.in_docker:
            return ["docker", "compose", "exec", "-T", service, *args]
        return args

    def download_command(self, source_url: str, destination: Path) -> list[str]:
        args = [
            self.settings.ytdlp_binary,
            "-f",
            self.settings.video_format,
            "--no-playlist",
            "--output",
            self.tool_path(destination),
            source_url,
        ]
        return self._wrap(self.settings.ytdlp_service, args)

    def extract_command(
        self, source: Path, start_seconds: int, duration_seconds: int, destination: Path
    ) -> list[str]:
        """Seek, cut and copy the audio stream without re-encoding."""
        args = [
            self.settings.ffmpeg_binary,
            "-y",
            "-ss",
            str(start_seconds),
            "-i",
            self.tool_path(source),
            "-t",
            str(duration_seconds),
            "-vn",
            "-acodec",
            "copy",
            self.tool_path(destination),
        ]
        return self._wrap(self.settings.ffmpeg_service, args)

    def concat_command(self, manifest: Path, destination: Path) -> list[str]:
        """Concatenate the files listed in an ffmpeg concat manifest, stream copy."""
        args = [
            self.settings.ffmpeg_binary,
            "-y",
            "-f",
            "concat",
            "-safe",
            "0",
            "-i",
            self.tool_path(manifest),
            "-c",
            "copy",
            self.tool_path(destination),
        ]
        return self._wrap(self.settings.ffmpeg_service, args)

    def services_command(self) -> list[str]:
        return ["docker", "compose", "ps", "--services", "--filter", "status=running"]
