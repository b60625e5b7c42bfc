"""CLI entrypoint to publish or fetch the report archive from a Bitrise step."""

from __future__ import annotations

import argparse
import asyncio
import json

from bitrise_publisher.core.config import get_settings
from bitrise_publisher.core.logging import configure_structlog
from bitrise_publisher.transfer.orchestrator import HttpUploader, TransferOrchestrator
from bitrise_publisher.transfer.progress import TqdmProgress


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Bitrise artifact publisher")
    sub = parser.add_subparsers(dest="command", required=True)

    publish = sub.add_parser("publish", help="Pack the working directory into the deploy dir")
    publish.add_argument("key", help="Publish key; its first path segment is the commit hash")
    publish.add_argument("--upload-url", help="PUT the archive to this pre-signed URL")

    fetch = sub.add_parser("fetch", help="Restore the archive published for a commit")
    fetch.add_argument("key", help="Fetch key; its first path segment is the commit hash prefix")
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)

    settings = get_settings()
    configure_structlog(debug=settings.debug)

    uploader = None
    if args.command == "publish" and args.upload_url:
        uploader = HttpUploader(args.upload_url)
    orchestrator = TransferOrchestrator(settings, progress=TqdmProgress(), uploader=uploader)

    if args.command == "publish":
        result = asyncio.run(orchestrator.publish(args.key))
    else:
        result = asyncio.run(orchestrator.fetch(args.key))
    print(json.dumps(result.to_dict(), sort_keys=True))


if __name__ == "__main__":
    main()
