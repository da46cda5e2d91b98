"""Turn scene-change timestamps into contiguous scene segments."""

from typing import Iterable

from scenecut.models import SceneSegment

# Length assumed for the last scene when the container duration is unknown.
UNKNOWN_TAIL_LENGTH = 10.0
# Minimum length forced onto a segment whose end does not lie after its start.
MIN_SEGMENT_LENGTH = 5.0


def build_segments(timestamps: Iterable[float], total_duration: float) -> list[SceneSegment]:
    """Split ``[0, total_duration)`` at each timestamp.

    Timestamps are sorted and deduplicated first. Each segment runs to the next
    timestamp; the last one runs to *total_duration*, or ``start + 10s`` when the
    duration is unknown (``<= start``). A segment that would end at or before
    its start is stretched to 5s, which is the only case where segments can
    overlap.
    """
    points = sorted(set(timestamps))
    if not points:
        points = [0.0]

    segments: list[SceneSegment] = []
    for i, start in enumerate(points):
        if i < len(points) - 1:
            end = points[i + 1]
        elif total_duration > start:
            end = total_duration
        else:
            end = start + UNKNOWN_TAIL_LENGTH

        if end <= start:
            end = start + MIN_SEGMENT_LENGTH

        segments.append(SceneSegment(start=start, end=end))
    return segments
