"""HTTP routes for the SceneCut media service."""

import logging
from pathlib import Path

from flask import Blueprint, current_app, jsonify, request

bp = Blueprint("media", __name__, url_prefix="/media")

logger = logging.getLogger(__name__)


def _services():
    return current_app.extensions["scenecut"]


def _check_input(path):
    """Return an error response for a missing/invalid input path, else None."""
    if not isinstance(path, str) or not path:
        return jsonify({"error": "'path' is required"}), 400
    if not Path(path).is_file():
        return jsonify({"error": f"File not found: {path}"}), 404
    return None


@bp.route("/upload", methods=["POST"])
def upload():
    if "file" not in request.files:
        return jsonify({"error": "No file provided"}), 400

    f = request.files["file"]
    if not f.filename:
        return jsonify({"error": "Empty filename"}), 400

    logger.info("Upload requested: %s", f.filename)
    try:
        stored = _services().uploads.store(f)
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    return jsonify({"message": "File uploaded", "path": str(stored)})


@bp.route("/metadata")
def metadata():
    path = request.args.get("path")
    error = _check_input(path)
    if error:
        return error

    logger.info("Metadata requested: %s", path)
    return jsonify(_services().probe.metadata(path).to_dict())


@bp.route("/audio", methods=["POST"])
def extract_audio():
    body = request.get_json(silent=True) or {}
    error = _check_input(body.get("path"))
    if error:
        return error

    output = _services().extractor.extract_audio(body["path"])
    return jsonify({"message": "Audio extracted", "outputPath": str(output)})


@bp.route("/frames", methods=["POST"])
def extract_frames():
    body = request.get_json(silent=True) or {}
    error = _check_input(body.get("path"))
    if error:
        return error

    fps = body.get("fps", 1.0)
    if isinstance(fps, bool) or not isinstance(fps, (int, float)) or fps <= 0:
        return jsonify({"error": "'fps' must be a positive number"}), 400

    output_dir = _services().extractor.extract_frames(body["path"], float(fps))
    return jsonify({"message": "Frames extracted", "outputDir": str(output_dir)})


@bp.route("/clip", methods=["POST"])
def create_clip():
    body = request.get_json(silent=True) or {}
    error = _check_input(body.get("path"))
    if error:
        return error

    if "start" not in body or "end" not in body:
        return jsonify({"error": "'start' and 'end' are required"}), 400

    try:
        output = _services().extractor.create_clip(body["path"], body["start"], body["end"])
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    return jsonify({"message": "Clip created", "outputPath": str(output)})


@bp.route("/scenes", methods=["POST"])
def detect_scenes():
    body = request.get_json(silent=True)
    if isinstance(body, dict) and isinstance(body.get("path"), str) and body["path"]:
        error = _check_input(body["path"])
        if error:
            return error

    status, payload = _services().dispatcher.dispatch(body)
    return jsonify(payload), status
