"""Flask application factory for the SceneCut media service."""

import tempfile
from dataclasses import dataclass
from pathlib import Path

from flask import Flask, jsonify

from scenecut.analyzers.scenes import SceneAnalyzer
from scenecut.config import ServiceConfig
from scenecut.dispatch import Dispatcher
from scenecut.editors.extract import MediaExtractor
from scenecut.errors import ProbeError, TranscodeError, WorkspaceError
from scenecut.ffutil import ProbeClient, TranscodeClient
from scenecut.storage import UploadStore
from scenecut.workspace import Workspace


@dataclass
class Services:
    uploads: UploadStore
    probe: ProbeClient
    extractor: MediaExtractor
    dispatcher: Dispatcher


def build_services(config: ServiceConfig) -> Services:
    """Wire every component from *config*."""
    workspace = Workspace(config.work_dir)
    probe = ProbeClient(config.ffprobe_path)
    transcoder = TranscodeClient(config.ffmpeg_path, timeout=config.transcode_timeout)
    analyzer = SceneAnalyzer(probe, transcoder, workspace)
    return Services(
        uploads=UploadStore(config.work_dir),
        probe=probe,
        extractor=MediaExtractor(transcoder, workspace),
        dispatcher=Dispatcher(analyzer),
    )


def create_app(config: ServiceConfig | None = None) -> Flask:
    config = config or ServiceConfig(work_dir=Path(tempfile.mkdtemp(prefix="scenecut_")))

    app = Flask(__name__)
    app.config["WORK_DIR"] = config.work_dir
    app.config["MAX_CONTENT_LENGTH"] = config.max_upload_bytes
    app.extensions["scenecut"] = build_services(config)

    from scenecut.web.routes import bp
    app.register_blueprint(bp)

    @app.errorhandler(413)
    def request_entity_too_large(error):
        return jsonify({"error": "File too large"}), 413

    @app.errorhandler(ProbeError)
    def probe_failed(error):
        return jsonify({"error": str(error)}), 500

    @app.errorhandler(TranscodeError)
    def transcode_failed(error):
        detail = f": {error.stderr}" if error.stderr else ""
        return jsonify({"error": f"{error}{detail}"}), 500

    @app.errorhandler(WorkspaceError)
    def workspace_failed(error):
        return jsonify({"error": str(error)}), 500

    return app
