"""Shared test fixtures."""

from pathlib import Path

import pytest

from scenecut.errors import ProbeError, TranscodeError

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def sample_config_path() -> Path:
    return FIXTURES_DIR / "sample_config.json"


class FakeProbe:
    """Stands in for ProbeClient; returns one canned timestamp list per call."""

    def __init__(self, passes=(), duration=0.0):
        self.passes = [list(p) for p in passes]
        self._duration = duration
        self.threshold_calls: list[float] = []

    def scene_timestamps(self, path, threshold):
        self.threshold_calls.append(threshold)
        idx = len(self.threshold_calls) - 1
        values = self.passes[idx] if idx < len(self.passes) else []
        yield from values

    def duration(self, path):
        if isinstance(self._duration, Exception):
            raise self._duration
        return self._duration


class FakeTranscoder:
    """Stands in for TranscodeClient; writes placeholder files instead of running ffmpeg."""

    def __init__(self, fail_clips=(), fail_thumbs=()):
        self.fail_clips = set(fail_clips)
        self.fail_thumbs = set(fail_thumbs)
        self.clips: list[tuple[float, float, Path]] = []
        self.frames: list[tuple[float, Path]] = []

    def cut_clip(self, input_path, start, duration, output_path):
        self.clips.append((start, duration, output_path))
        if len(self.clips) in self.fail_clips:
            raise TranscodeError("ffmpeg failed (rc=1)")
        output_path.write_bytes(b"clip")

    def extract_frame(self, input_path, at, output_path):
        self.frames.append((at, output_path))
        if len(self.clips) in self.fail_thumbs:
            raise TranscodeError("ffmpeg failed (rc=1)")
        output_path.write_bytes(b"jpg")


@pytest.fixture
def probe_error() -> ProbeError:
    return ProbeError("ffprobe failed (rc=1)")
