"""Exception types raised across SceneCut."""


class ScenecutError(Exception):
    """Base class for every error SceneCut raises on purpose."""


class ConfigError(ScenecutError):
    """Executables or the work directory are unusable; nothing can run."""


class WorkspaceError(ScenecutError, OSError):
    """An output directory could not be created."""


class ProbeError(ScenecutError):
    """ffprobe failed or produced output we could not parse."""


class TranscodeError(ScenecutError):
    """ffmpeg failed to produce the requested output."""

    def __init__(self, message: str, stderr: str = "") -> None:
        super().__init__(message)
        self.stderr = stderr
