"""Single-shot extraction jobs: audio track, sampled frames, one clip."""

import logging
import re
from pathlib import Path

from scenecut.errors import TranscodeError
from scenecut.ffutil import TranscodeClient
from scenecut.workspace import Workspace

logger = logging.getLogger(__name__)

_TIMECODE_RE = re.compile(r"^(?:(?:(\d+):)?(\d+):)?(\d+(?:\.\d+)?)$")


def parse_timecode(value: str | float | int) -> float:
    """Convert ``"HH:MM:SS[.fff]"``, ``"MM:SS"``, ``"SS[.fff]"`` or a number to seconds."""
    if isinstance(value, bool):
        raise ValueError(f"Invalid time: {value!r}")
    if isinstance(value, (int, float)):
        seconds = float(value)
    else:
        m = _TIMECODE_RE.match(value.strip())
        if m is None:
            raise ValueError(f"Invalid time: {value!r}")
        hours, minutes, secs = m.groups()
        if (hours or minutes) and float(secs) >= 60:
            raise ValueError(f"Invalid time: {value!r}")
        seconds = int(hours or 0) * 3600 + int(minutes or 0) * 60 + float(secs)
    if seconds < 0:
        raise ValueError(f"Time must not be negative: {value!r}")
    return seconds


class MediaExtractor:
    def __init__(self, transcoder: TranscodeClient, workspace: Workspace) -> None:
        self.transcoder = transcoder
        self.workspace = workspace

    def extract_audio(self, input_path: str | Path) -> Path:
        """Write the audio track as a 44.1 kHz stereo WAV."""
        output = self.workspace.unique_name("audio", ".wav")
        try:
            self.transcoder.extract_audio(input_path, output)
        except TranscodeError:
            output.unlink(missing_ok=True)
            raise
        logger.info("Extracted audio from %s to %s", input_path, output)
        return output

    def extract_frames(self, input_path: str | Path, fps: float) -> Path:
        """Sample *fps* frames per second into a new directory and return it."""
        if fps <= 0:
            raise ValueError("fps must be positive")
        job = self.workspace.allocate("frames")
        self.transcoder.extract_frames(input_path, fps, job.base_dir)
        logger.info("Extracted frames from %s at %s fps to %s", input_path, fps, job.base_dir)
        return job.base_dir

    def create_clip(self, input_path: str | Path, start: str | float, end: str | float) -> Path:
        start_sec = parse_timecode(start)
        end_sec = parse_timecode(end)
        if end_sec <= start_sec:
            raise ValueError("'end' must be after 'start'")

        output = self.workspace.unique_name("clip", ".mp4")
        try:
            self.transcoder.cut_clip(input_path, start_sec, end_sec - start_sec, output)
        except TranscodeError:
            output.unlink(missing_ok=True)
            raise
        logger.info("Cut %s [%s, %s) to %s", input_path, start_sec, end_sec, output)
        return output
