"""Scene analysis: find cuts, then write one clip and one thumbnail per scene."""

import logging
import time

from scenecut.analyzers.segments import build_segments
from scenecut.errors import ProbeError, TranscodeError
from scenecut.ffutil import ProbeClient, TranscodeClient
from scenecut.models import AnalyzeRequest, AnalyzeResponse, SceneResult, SceneSegment
from scenecut.workspace import JobWorkspace, Workspace

logger = logging.getLogger(__name__)

# A first pass that finds nothing is retried once at a lower threshold,
# but only when the caller's threshold is above RETRY_MIN_THRESHOLD.
RETRY_MIN_THRESHOLD = 0.1
RETRY_FLOOR = 0.05
RETRY_FACTOR = 0.5

CLIP_NAME = "scene_{:03d}.mp4"
THUMB_NAME = "thumb_{:03d}.jpg"


class SceneAnalyzer:
    """Detect scene boundaries in a video and cut each scene into its own clip.

    Collaborators are passed in; the analyzer holds no per-job state, so one
    instance can serve concurrent jobs.

    Args:
        probe: Answers duration and scene-change questions.
        transcoder: Writes clips and thumbnails.
        workspace: Allocates a fresh output directory per job.
        min_scene_length: Segments shorter than this (seconds) are dropped as noise.
    """

    def __init__(
        self,
        probe: ProbeClient,
        transcoder: TranscodeClient,
        workspace: Workspace,
        min_scene_length: float = 0.5,
    ) -> None:
        self.probe = probe
        self.transcoder = transcoder
        self.workspace = workspace
        self.min_scene_length = min_scene_length

    def analyze(self, request: AnalyzeRequest) -> AnalyzeResponse:
        """Run the full pipeline for one input file.

        Only a workspace allocation failure is fatal. Prober failures degrade to
        a single scene and per-scene ffmpeg failures drop just that scene.
        """
        started = time.monotonic()
        logger.info("Scene analysis started: input=%s threshold=%s", request.path, request.threshold)

        job = self.workspace.allocate("scenes")
        try:
            timestamps = self.detect_scene_changes(request.path, request.threshold)
            logger.info("Scene change timestamps: %s", timestamps)

            duration = self._duration(request.path)
            segments = build_segments(timestamps, duration)
            logger.info("Built %d segments", len(segments))

            results = self._render(request.path, segments, job)
        except Exception:
            job.discard()
            raise

        elapsed = time.monotonic() - started
        logger.info(
            "Scene analysis finished: %d scenes in %.1fs (%s)",
            len(results), elapsed, job.base_dir,
        )
        return AnalyzeResponse(total_scenes=len(results), scenes=results)

    def detect_scene_changes(self, path: str, threshold: float) -> list[float]:
        """Return ``[0.0, t1, t2, ...]``, retrying once more sensitively if nothing was found."""
        timestamps = self._collect(path, threshold)

        if len(timestamps) <= 1 and threshold > RETRY_MIN_THRESHOLD:
            retry_threshold = max(RETRY_FLOOR, threshold * RETRY_FACTOR)
            logger.warning(
                "No scene changes at threshold=%s; retrying at %s", threshold, retry_threshold
            )
            retried = self._collect(path, retry_threshold)
            if len(retried) > 1:
                return retried

        if len(timestamps) <= 1:
            logger.warning("No scene changes detected in %s; treating it as a single scene", path)
        return timestamps

    def _collect(self, path: str, threshold: float) -> list[float]:
        return [0.0, *self.probe.scene_timestamps(path, threshold)]

    def _duration(self, path: str) -> float:
        try:
            return self.probe.duration(path)
        except ProbeError as e:
            logger.warning("Could not read duration of %s, estimating instead: %s", path, e)
            return 0.0

    def _render(
        self, path: str, segments: list[SceneSegment], job: JobWorkspace
    ) -> list[SceneResult]:
        results: list[SceneResult] = []
        scene_index = 0

        for segment in segments:
            if segment.duration < self.min_scene_length:
                logger.debug(
                    "Skipping short segment %.2fs (%s - %s)",
                    segment.duration, segment.start, segment.end,
                )
                continue

            # Numbering follows attempts: a failed scene leaves a gap.
            scene_index += 1
            clip_path = job.resolve(CLIP_NAME.format(scene_index))
            thumb_path = job.resolve(THUMB_NAME.format(scene_index))

            try:
                self.transcoder.cut_clip(path, segment.start, segment.duration, clip_path)
                midpoint = segment.start + segment.duration / 2.0
                self.transcoder.extract_frame(path, midpoint, thumb_path)
            except (TranscodeError, OSError, ValueError) as e:
                logger.error("Failed to produce scene %d: %s", scene_index, e)
                continue

            results.append(
                SceneResult(
                    start_time=segment.start,
                    end_time=segment.end,
                    clip_path=str(clip_path.absolute()),
                    thumbnail_path=str(thumb_path.absolute()),
                )
            )
        return results
