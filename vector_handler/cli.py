"""Command line interface for the vector handler."""

from __future__ import annotations

import argparse
import base64
import json
import sys
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from vector_handler.configuration import HandlerConfig, load_config_from_file
from vector_handler.errors import VectorHandlerError
from vector_handler.handler import VectorHandler
from vector_handler.observability import configure_logging, get_event_recorder
from vector_handler.types import DEFAULT_COUNT, DEFAULT_THRESHOLD

RECORDER = get_event_recorder("cli")


def _json_argument(value: str) -> Any:
    try:
        return json.loads(value)
    except json.JSONDecodeError as exc:
        raise argparse.ArgumentTypeError(f"invalid JSON: {exc}") from exc


def _read_image(path: str | None) -> str | None:
    if path is None:
        return None
    return base64.b64encode(Path(path).expanduser().read_bytes()).decode("ascii")


def _add_input_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--text", default=None, help="Text to embed")
    parser.add_argument(
        "--image-file",
        default=None,
        help="Image file to embed (sent base64-encoded)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vector-handler",
        description="Store and query embeddings with JSON metadata",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to a config.py that defines VECTOR_HANDLER_CONFIG "
        "(default: read the environment)",
    )
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    subparsers = parser.add_subparsers(dest="command", required=True)

    ingest_parser = subparsers.add_parser("ingest", help="Embed an input and store it")
    _add_input_arguments(ingest_parser)
    ingest_parser.add_argument(
        "--metadata", type=_json_argument, required=True, help="Metadata as JSON"
    )

    retrieve_parser = subparsers.add_parser("retrieve", help="Query similar records")
    _add_input_arguments(retrieve_parser)
    retrieve_parser.add_argument(
        "--metadata", type=_json_argument, required=True, help="Containment filter as JSON"
    )
    retrieve_parser.add_argument(
        "--threshold", type=float, default=DEFAULT_THRESHOLD, help="Minimum similarity score"
    )
    retrieve_parser.add_argument(
        "--count", type=int, default=DEFAULT_COUNT, help="Maximum number of results"
    )

    remove_parser = subparsers.add_parser("remove", help="Delete records matching a filter")
    remove_parser.add_argument(
        "--metadata", type=_json_argument, required=True, help="Containment filter as JSON"
    )
    return parser


def _load_config(config_path: str | None) -> HandlerConfig:
    if config_path:
        return load_config_from_file(config_path)
    load_dotenv()
    return HandlerConfig.from_env()


def _dispatch(args: argparse.Namespace, handler: VectorHandler) -> int:
    if args.command == "ingest":
        handler.ingest(args.metadata, text=args.text, image=_read_image(args.image_file))
        print("Ingested 1 record")
    elif args.command == "retrieve":
        result = handler.retrieve(
            args.metadata,
            text=args.text,
            image=_read_image(args.image_file),
            threshold=args.threshold,
            count=args.count,
        )
        print(json.dumps(result, indent=2))
    else:
        handler.remove(args.metadata)
        print("Removed matching records")
    return 0


def main(argv: list[str] | None = None, handler: VectorHandler | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    owns_handler = handler is None
    try:
        if handler is None:
            config = _load_config(args.config)
            configure_logging(
                args.log_level or config.observability.log_level,
                enable_events=config.observability.enable_events,
            )
            handler = VectorHandler.from_config(config)
        RECORDER.record("run.start", {"command": args.command})
        status = _dispatch(args, handler)
    except (VectorHandlerError, OSError) as exc:
        RECORDER.record("run.error", {"command": args.command, "error": str(exc)})
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    finally:
        if owns_handler and handler is not None:
            handler.close()
    RECORDER.record("run.complete", {"command": args.command})
    return status


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
