"""Service configuration: where outputs go and which executables to run."""

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from scenecut.errors import ConfigError
from scenecut.ffutil import check_ffmpeg

ENV_PREFIX = "SCENECUT_"


@dataclass
class ServiceConfig:
    """Everything needed to build the service's components."""

    work_dir: Path
    ffmpeg_path: str = "ffmpeg"
    ffprobe_path: str = "ffprobe"
    max_upload_bytes: int = 10 * 1024 * 1024 * 1024  # 10 GB
    transcode_timeout: float | None = None
    log_level: str = "INFO"


def load_config(path: str | Path) -> ServiceConfig:
    """Load a config from a JSON file."""
    path = Path(path)
    data = json.loads(path.read_text())

    if "work_dir" not in data:
        raise ValueError("Config must contain a 'work_dir' field")

    timeout = data.get("transcode_timeout")
    return ServiceConfig(
        work_dir=Path(data["work_dir"]),
        ffmpeg_path=data.get("ffmpeg_path", "ffmpeg"),
        ffprobe_path=data.get("ffprobe_path", "ffprobe"),
        max_upload_bytes=int(data.get("max_upload_bytes", ServiceConfig.max_upload_bytes)),
        transcode_timeout=float(timeout) if timeout is not None else None,
        log_level=data.get("log_level", "INFO"),
    )


def config_from_env(environ: Mapping[str, str] | None = None) -> ServiceConfig:
    """Build a config from ``SCENECUT_*`` environment variables."""
    env = os.environ if environ is None else environ

    timeout = env.get(ENV_PREFIX + "TRANSCODE_TIMEOUT")
    max_upload = env.get(ENV_PREFIX + "MAX_UPLOAD_BYTES")
    return ServiceConfig(
        work_dir=Path(env.get(ENV_PREFIX + "WORK_DIR", "./work")),
        ffmpeg_path=env.get(ENV_PREFIX + "FFMPEG", "ffmpeg"),
        ffprobe_path=env.get(ENV_PREFIX + "FFPROBE", "ffprobe"),
        max_upload_bytes=int(max_upload) if max_upload else ServiceConfig.max_upload_bytes,
        transcode_timeout=float(timeout) if timeout else None,
        log_level=env.get(ENV_PREFIX + "LOG_LEVEL", "INFO"),
    )


def validate_config(config: ServiceConfig) -> None:
    """Raise ConfigError unless both executables resolve and work_dir is writable."""
    check_ffmpeg(config.ffmpeg_path, config.ffprobe_path)
    try:
        config.work_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ConfigError(f"Cannot create work directory {config.work_dir}: {e}") from e
    if not os.access(config.work_dir, os.W_OK):
        raise ConfigError(f"Work directory {config.work_dir} is not writable")
