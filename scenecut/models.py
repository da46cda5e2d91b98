"""Shared data types used across SceneCut."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class AnalyzeRequest:
    """A scene analysis job: which file, and how sensitive the cut detector is."""

    path: str
    threshold: float


@dataclass(frozen=True)
class SceneSegment:
    """A half-open ``[start, end)`` interval in seconds."""

    start: float
    end: float

    @property
    def duration(self) -> float:
        return self.end - self.start


@dataclass
class SceneResult:
    """One produced scene: its time span plus the clip and thumbnail on disk."""

    start_time: float
    end_time: float
    clip_path: str
    thumbnail_path: str

    def to_dict(self) -> dict:
        return {
            "startTime": self.start_time,
            "endTime": self.end_time,
            "clipPath": self.clip_path,
            "thumbnailPath": self.thumbnail_path,
        }


@dataclass
class AnalyzeResponse:
    total_scenes: int
    scenes: list[SceneResult] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "totalScenes": self.total_scenes,
            "scenes": [s.to_dict() for s in self.scenes],
        }


@dataclass
class FormatInfo:
    name: str
    long_name: str


@dataclass
class StreamInfo:
    """A single audio/video/data stream as reported by ffprobe."""

    codec_name: str | None
    codec_long_name: str | None
    codec_type: str
    width: int = 0
    height: int = 0
    frame_rate: str = "N/A"


@dataclass
class MediaMetadata:
    """Container-level metadata extracted from a media file via ffprobe."""

    filename: str
    duration: float
    size: int
    bit_rate: int
    format: FormatInfo
    streams: list[StreamInfo] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "filename": self.filename,
            "duration": self.duration,
            "size": self.size,
            "bitRate": self.bit_rate,
            "format": {"name": self.format.name, "longName": self.format.long_name},
            "streams": [
                {
                    "codecName": s.codec_name,
                    "codecLongName": s.codec_long_name,
                    "codecType": s.codec_type,
                    "width": s.width,
                    "height": s.height,
                    "frameRate": s.frame_rate,
                }
                for s in self.streams
            ],
        }
