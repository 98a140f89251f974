"""Command-line interface for uploading media and publishing posts."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Callable, Sequence

from ..errors import MediaRelayError
from ..platforms.twitter import TwitterMediaUploader
from ..services import UploadRequest
from ..settings import load_config
from ..utils.logging import configure_logging, get_logger
from .bootstrap import build_api_client, build_orchestrator

LOGGER = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(structured=not args.log_plain)

    handler: Callable[[argparse.Namespace], int] | None = getattr(args, "handler", None)
    if handler is None:
        parser.print_help(sys.stderr)
        return EXIT_FAILURE
    try:
        return handler(args)
    except MediaRelayError as exc:
        LOGGER.error(
            "Command failed",
            extra={"event": "cli.error", "command": args.command, "error_type": type(exc).__name__},
        )
        print(json.dumps({"error": exc.message}, ensure_ascii=False), file=sys.stderr)
        return EXIT_USAGE if exc.client_error else EXIT_FAILURE


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="media-relay", description="Upload media and publish a post")
    parser.add_argument("--config", help="Path to configuration file", default=None)
    parser.add_argument(
        "--log-plain",
        action="store_true",
        help="Use plain-text logs instead of JSON",
    )

    subparsers = parser.add_subparsers(dest="command")
    _add_upload_command(subparsers)
    _add_status_command(subparsers)
    return parser


def _add_upload_command(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    upload_parser = subparsers.add_parser("upload", help="Upload a video or image and post it")
    source = upload_parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--url", help="Remote media URL to download first")
    source.add_argument("--file", type=Path, help="Local media file")
    upload_parser.add_argument(
        "--mime-type",
        dest="mime_type",
        help="Override the detected MIME type (video/mp4, image/png, ...)",
    )
    upload_parser.add_argument("--text", help="Post text; defaults to the configured text")
    upload_parser.add_argument("--reply-to", dest="reply_to", help="Post id to reply to")
    upload_parser.set_defaults(handler=_handle_upload)


def _add_status_command(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    status_parser = subparsers.add_parser("status", help="Show processing status of uploaded media")
    status_parser.add_argument("media_id", help="Media id returned by a previous upload")
    status_parser.set_defaults(handler=_handle_status)


def _handle_upload(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    orchestrator = build_orchestrator(config)
    request = UploadRequest(
        media_url=args.url,
        file_path=args.file,
        mime_type=args.mime_type,
        text=args.text,
        reply_to_post_id=args.reply_to,
    )
    LOGGER.info(
        "Upload started",
        extra={"event": "cli.command", "command": "upload", "source": args.url or str(args.file)},
    )
    result = orchestrator.publish(request)
    print(json.dumps(result.as_dict(), ensure_ascii=False, indent=2))
    return EXIT_OK


def _handle_status(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    uploader = TwitterMediaUploader(build_api_client(config), settings=config.upload)
    payload = uploader.check_status(args.media_id)
    print(json.dumps(payload, ensure_ascii=False, indent=2))
    return EXIT_OK


__all__ = ["main"]
