"""FFmpeg/ffprobe subprocess helpers."""

import json
import logging
import math
import shutil
import subprocess
from pathlib import Path
from typing import Iterator

from scenecut.errors import ConfigError, ProbeError, TranscodeError
from scenecut.models import FormatInfo, MediaMetadata, StreamInfo

logger = logging.getLogger(__name__)

# Characters of ffmpeg stderr kept on a TranscodeError.
STDERR_TAIL = 500


class FFmpegNotFoundError(ConfigError):
    pass


def check_ffmpeg(ffmpeg_path: str = "ffmpeg", ffprobe_path: str = "ffprobe") -> None:
    """Raise FFmpegNotFoundError if either executable cannot be resolved."""
    for cmd in (ffmpeg_path, ffprobe_path):
        if shutil.which(cmd) is None:
            raise FFmpegNotFoundError(f"{cmd} not found on PATH")


def to_ms_arg(seconds: float) -> str:
    """Format seconds as an ffmpeg millisecond duration, truncating (``1.2345`` -> ``1234ms``)."""
    return f"{math.floor(seconds * 1000)}ms"


# ---------------------------------------------------------------------------
# Process runner
# ---------------------------------------------------------------------------

def run_tool(cmd: list[str], timeout: float | None = None) -> subprocess.CompletedProcess:
    """Run *cmd* to completion, capturing stdout and stderr as text.

    Undecodable bytes (ffmpeg echoes arbitrary metadata tags) become U+FFFD.
    """
    logger.debug("Running: %s", " ".join(cmd))
    return subprocess.run(
        cmd, capture_output=True, encoding="utf-8", errors="replace", timeout=timeout
    )


def iter_tool_lines(cmd: list[str]) -> Iterator[str]:
    """Run *cmd* and yield its merged stdout/stderr one line at a time.

    The child is started on first iteration. Raises ``OSError`` if it cannot be
    spawned and ``subprocess.CalledProcessError`` after the last line if it
    exits non-zero. Closing the generator early kills the child.
    """
    logger.debug("Streaming: %s", " ".join(cmd))
    proc = subprocess.Popen(
        cmd,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        encoding="utf-8",
        errors="replace",
        bufsize=1,
    )
    try:
        for line in proc.stdout:
            yield line.rstrip("\r\n")
        returncode = proc.wait()
    finally:
        if proc.poll() is None:
            proc.kill()
            proc.wait()
        proc.stdout.close()

    if returncode != 0:
        raise subprocess.CalledProcessError(returncode, cmd)


# ---------------------------------------------------------------------------
# ffprobe
# ---------------------------------------------------------------------------

def parse_timestamp(line: str) -> float | None:
    """Parse one line of ffprobe ``pts_time`` output.

    Returns None for blank lines, log noise, and values that are not a finite
    non-negative number of seconds.
    """
    text = line.strip()
    if not text:
        return None
    try:
        value = float(text)
    except ValueError:
        logger.debug("Ignoring non-numeric ffprobe output: %r", text)
        return None
    if not math.isfinite(value) or value < 0:
        return None
    return value


def parse_metadata(data: dict) -> MediaMetadata:
    """Build MediaMetadata from ffprobe's ``-show_format -show_streams`` JSON."""
    fmt = data.get("format", {})
    streams: list[StreamInfo] = []
    for s in data.get("streams", []):
        frame_rate = s.get("avg_frame_rate")
        if not frame_rate or frame_rate == "0/0":
            frame_rate = "N/A"
        streams.append(
            StreamInfo(
                codec_name=s.get("codec_name"),
                codec_long_name=s.get("codec_long_name"),
                codec_type=str(s.get("codec_type", "unknown")).upper(),
                width=int(s.get("width", 0)),
                height=int(s.get("height", 0)),
                frame_rate=frame_rate,
            )
        )

    return MediaMetadata(
        filename=fmt.get("filename", ""),
        duration=float(fmt.get("duration", 0.0)),
        size=int(fmt.get("size", 0)),
        bit_rate=int(fmt.get("bit_rate", 0)),
        format=FormatInfo(
            name=fmt.get("format_name", ""),
            long_name=fmt.get("format_long_name", ""),
        ),
        streams=streams,
    )


class ProbeClient:
    """Read-only questions about a media file, answered by ffprobe."""

    def __init__(self, ffprobe_path: str = "ffprobe", timeout: float | None = None) -> None:
        self.ffprobe_path = ffprobe_path
        self.timeout = timeout

    def _run(self, cmd: list[str]) -> str:
        try:
            result = run_tool(cmd, timeout=self.timeout)
        except (OSError, subprocess.TimeoutExpired) as e:
            raise ProbeError(f"could not run {self.ffprobe_path}: {e}") from e
        if result.returncode != 0:
            stderr = (result.stderr or "").strip()
            raise ProbeError(
                f"ffprobe failed (rc={result.returncode}): {stderr[-STDERR_TAIL:]}"
            )
        return result.stdout

    def duration(self, path: str | Path) -> float:
        """Return the container duration in seconds."""
        cmd = [
            self.ffprobe_path,
            "-v", "error",
            "-show_entries", "format=duration",
            "-of", "default=noprint_wrappers=1:nokey=1",
            str(path),
        ]
        out = self._run(cmd).strip()
        try:
            value = float(out.splitlines()[0]) if out else float("nan")
        except ValueError:
            raise ProbeError(f"Unparseable duration from ffprobe: {out!r}") from None
        if not math.isfinite(value) or value < 0:
            raise ProbeError(f"Unparseable duration from ffprobe: {out!r}")
        return value

    def metadata(self, path: str | Path) -> MediaMetadata:
        """Extract format and stream metadata."""
        cmd = [
            self.ffprobe_path,
            "-v", "quiet",
            "-print_format", "json",
            "-show_format",
            "-show_streams",
            str(path),
        ]
        out = self._run(cmd)
        try:
            return parse_metadata(json.loads(out))
        except (ValueError, TypeError) as e:
            raise ProbeError(f"Unparseable metadata from ffprobe: {e}") from e

    def scene_timestamps(self, path: str | Path, threshold: float) -> Iterator[float]:
        """Yield scene-change timestamps (seconds) as ffprobe reports them.

        Never raises: if ffprobe cannot be started or fails, the failure is
        logged and the sequence simply ends. ``0.0`` is not included.
        """
        cmd = [
            self.ffprobe_path,
            "-v", "error",
            "-show_entries", "frame=pts_time",
            "-of", "default=noprint_wrappers=1:nokey=1",
            "-f", "lavfi",
            "-i", f"movie={path},select=gt(scene\\,{threshold:f})",
        ]
        try:
            for line in iter_tool_lines(cmd):
                value = parse_timestamp(line)
                if value is not None:
                    yield value
        except subprocess.CalledProcessError as e:
            logger.error("Scene detection failed for %s (rc=%d)", path, e.returncode)
        except (OSError, ValueError) as e:
            logger.error("Scene detection could not run for %s: %s", path, e)


# ---------------------------------------------------------------------------
# ffmpeg
# ---------------------------------------------------------------------------

class TranscodeClient:
    """Jobs that write new files with ffmpeg. Every call blocks until ffmpeg exits."""

    def __init__(self, ffmpeg_path: str = "ffmpeg", timeout: float | None = None) -> None:
        self.ffmpeg_path = ffmpeg_path
        self.timeout = timeout

    def _run(self, args: list[str], output: Path) -> None:
        cmd = [self.ffmpeg_path, *args]
        try:
            result = run_tool(cmd, timeout=self.timeout)
        except subprocess.TimeoutExpired as e:
            raise TranscodeError(f"ffmpeg timed out after {e.timeout}s writing {output}") from e
        except OSError as e:
            raise TranscodeError(f"could not run {self.ffmpeg_path}: {e}") from e

        stderr = result.stderr or ""
        if result.returncode != 0:
            raise TranscodeError(
                f"ffmpeg failed (rc={result.returncode}) writing {output}",
                stderr=stderr[-STDERR_TAIL:],
            )
        if not output.exists() or (output.is_file() and output.stat().st_size == 0):
            raise TranscodeError(
                f"ffmpeg exited cleanly but {output} was not written",
                stderr=stderr[-STDERR_TAIL:],
            )

    def cut_clip(
        self, input_path: str | Path, start: float, duration: float, output_path: Path
    ) -> None:
        """Copy ``[start, start+duration)`` into *output_path* without re-encoding.

        Stream copy cuts on the nearest keyframe, so boundaries are approximate.
        """
        self._run(
            [
                "-ss", to_ms_arg(start),
                "-i", str(input_path),
                "-t", to_ms_arg(duration),
                "-c:v", "copy",
                "-c:a", "copy",
                "-y", str(output_path),
            ],
            output_path,
        )

    def extract_frame(self, input_path: str | Path, at: float, output_path: Path) -> None:
        """Write the single frame at *at* seconds as an image."""
        self._run(
            [
                "-ss", to_ms_arg(at),
                "-i", str(input_path),
                "-frames:v", "1",
                "-f", "image2",
                "-y", str(output_path),
            ],
            output_path,
        )

    def extract_audio(
        self, input_path: str | Path, output_path: Path, sample_rate: int = 44100, channels: int = 2
    ) -> None:
        """Extract the audio track as 16-bit PCM WAV."""
        self._run(
            [
                "-i", str(input_path),
                "-vn",
                "-acodec", "pcm_s16le",
                "-ar", str(sample_rate),
                "-ac", str(channels),
                "-y", str(output_path),
            ],
            output_path,
        )

    def extract_frames(self, input_path: str | Path, fps: float, output_dir: Path) -> None:
        """Sample *fps* frames per second into ``output_dir/frame_NNNN.jpg``."""
        pattern = output_dir / "frame_%04d.jpg"
        self._run(
            [
                "-i", str(input_path),
                "-vf", f"fps={fps}",
                "-y", str(pattern),
            ],
            output_dir,
        )
        if not any(output_dir.glob("frame_*.jpg")):
            raise TranscodeError(f"ffmpeg wrote no frames into {output_dir}")
