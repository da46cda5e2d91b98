"""Wire-level entry point for scene analysis: JSON dict in, status + JSON dict out."""

import logging

from scenecut.analyzers.scenes import SceneAnalyzer
from scenecut.errors import ScenecutError
from scenecut.models import AnalyzeRequest

logger = logging.getLogger(__name__)


def parse_analyze_request(payload) -> AnalyzeRequest:
    """Validate ``{"path": str, "threshold": number}``. Raises ValueError."""
    if not isinstance(payload, dict):
        raise ValueError("Request body must be a JSON object")

    path = payload.get("path")
    if not isinstance(path, str) or not path:
        raise ValueError("'path' must be a non-empty string")

    threshold = payload.get("threshold")
    if isinstance(threshold, bool) or not isinstance(threshold, (int, float)):
        raise ValueError("'threshold' must be a number")

    return AnalyzeRequest(path=path, threshold=float(threshold))


class Dispatcher:
    def __init__(self, analyzer: SceneAnalyzer) -> None:
        self.analyzer = analyzer

    def dispatch(self, payload) -> tuple[int, dict]:
        try:
            request = parse_analyze_request(payload)
        except ValueError as e:
            return 400, {"error": str(e)}

        try:
            response = self.analyzer.analyze(request)
        except (ScenecutError, OSError) as e:
            logger.exception("Scene analysis failed for %s", request.path)
            return 500, {"error": str(e)}
        except Exception as e:
            logger.exception("Unexpected error analysing %s", request.path)
            return 500, {"error": f"Internal error: {e}"}

        return 200, response.to_dict()
