"""Thin CLI entry point: runs the web service or a one-off scene analysis."""

import argparse
import json
import logging
import sys
from pathlib import Path

from scenecut.config import ServiceConfig, config_from_env, load_config, validate_config
from scenecut.errors import ConfigError, ScenecutError

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"


def _configure_logging(level: str, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _load(args: argparse.Namespace) -> ServiceConfig:
    config = load_config(args.config) if args.config else config_from_env()
    if args.work_dir:
        config.work_dir = args.work_dir
    return config


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="scenecut",
        description="SceneCut, an ffmpeg-backed media service for metadata, extraction and scene splitting.",
    )
    parser.add_argument("--config", "-c", type=Path, help="Path to a JSON config file")
    parser.add_argument("--work-dir", type=Path, help="Directory for generated outputs")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command")

    serve = sub.add_parser("serve", help="Run the HTTP service")
    serve.add_argument("--port", type=int, default=8080, help="Port to listen on")
    serve.add_argument("--host", type=str, default="127.0.0.1", help="Host to bind to")

    scenes = sub.add_parser("scenes", help="Split a video into per-scene clips")
    scenes.add_argument("video", type=Path, help="Input video file")
    scenes.add_argument("--threshold", "-t", type=float, default=0.3, help="Scene change threshold (0-1)")

    info = sub.add_parser("info", help="Print media metadata as JSON")
    info.add_argument("video", type=Path, help="Input media file")

    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    config = _load(args)
    _configure_logging(config.log_level, args.verbose)

    try:
        validate_config(config)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    from scenecut.web import build_services

    if args.command == "serve":
        from scenecut.web import create_app
        app = create_app(config)
        print(f"SceneCut service: http://{args.host}:{args.port}/media")
        app.run(host=args.host, port=args.port, debug=False)
        return

    if not args.video.is_file():
        print(f"Error: {args.video} not found.", file=sys.stderr)
        sys.exit(1)

    services = build_services(config)

    if args.command == "info":
        try:
            meta = services.probe.metadata(args.video)
        except ScenecutError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        print(json.dumps(meta.to_dict(), indent=2))
        return

    status, body = services.dispatcher.dispatch(
        {"path": str(args.video.resolve()), "threshold": args.threshold}
    )
    if status != 200:
        print(f"Error: {body['error']}", file=sys.stderr)
        sys.exit(1)

    print()
    print(f"Done! {body['totalScenes']} scenes")
    for scene in body["scenes"]:
        print(f"  {scene['startTime']:8.2f}s -> {scene['endTime']:8.2f}s  {scene['clipPath']}")
