"""Transfer orchestrator — the publish and fetch entry points.

publish:
  1. Collect files under the working directory that match the pattern
  2. Pack them into <artifact_name>.zip in the Bitrise deploy directory
  3. Hand the archive to the uploader (by default the Bitrise "deploy"
     step uploads the directory after this step finishes)

fetch:
  1. Resolve the artifact published for the key's commit
  2. Download and unpack it
  3. Write the entries into the expected directory

Progress is reported as one unit per archive. Every step is awaited in
turn; nothing runs concurrently within a publish or fetch.
"""

import logging
from pathlib import Path
from typing import Optional, Protocol

from bitrise_publisher.archive.codec import unpack, write_archive
from bitrise_publisher.archive.materializer import write
from bitrise_publisher.archive.types import LocalFile, TransferTarget
from bitrise_publisher.bitrise.client import BitriseClient
from bitrise_publisher.bitrise.resolver import ArtifactResolver, ArtifactSource
from bitrise_publisher.bitrise.transport import BlobTransport
from bitrise_publisher.core.config import Settings
from bitrise_publisher.core.logging import bind_transfer_key
from bitrise_publisher.errors import TransferIOError
from bitrise_publisher.transfer.files import collect_local_files
from bitrise_publisher.transfer.progress import NullProgress, ProgressReporter
from bitrise_publisher.transfer.types import FetchResult, PublishResult

logger = logging.getLogger(__name__)


class Uploader(Protocol):
    async def upload(self, archive: LocalFile) -> None: ...


class DeployDirUploader:
    """Leaves the archive in the deploy directory.

    Bitrise's deploy step uploads everything in BITRISE_DEPLOY_DIR as build
    artifacts, so there is nothing to send from here.
    """

    async def upload(self, archive: LocalFile) -> None:
        logger.info("Archive %s left for the Bitrise deploy step", archive.absolute_path)


class HttpUploader:
    """PUTs the archive to a pre-signed URL."""

    def __init__(self, url: str, transport: Optional[BlobTransport] = None) -> None:
        self.url = url
        self.transport = transport or BlobTransport()

    async def upload(self, archive: LocalFile) -> None:
        try:
            data = Path(archive.absolute_path).read_bytes()
        except OSError as exc:
            raise TransferIOError(
                f"Cannot read archive ({exc.strerror})", archive.absolute_path
            ) from exc
        await self.transport.upload(self.url, data, archive.content_type)
        logger.info("Uploaded %s (%d bytes)", archive.relative_path, len(data))


class TransferOrchestrator:
    def __init__(
        self,
        settings: Settings,
        client: Optional[ArtifactSource] = None,
        transport: Optional[BlobTransport] = None,
        progress: Optional[ProgressReporter] = None,
        uploader: Optional[Uploader] = None,
    ) -> None:
        self.settings = settings
        self.client = client or BitriseClient.from_settings(settings)
        self.transport = transport or BlobTransport()
        self.progress = progress or NullProgress()
        self.uploader = uploader or DeployDirUploader()

    async def publish(self, key: str) -> PublishResult:
        """Pack the working directory and hand the archive to the uploader.

        With no_emit the archive is still written locally but not uploaded.
        """
        settings = self.settings
        report_url = settings.report_url()

        with bind_transfer_key(key):
            base = settings.working_dirs().base
            files = collect_local_files(base, settings.pattern)
            if not files:
                logger.warning(
                    "No files matching %s under %s; publishing an empty archive",
                    settings.pattern, base,
                )

            self.progress.start(1)
            try:
                archive = write_archive(files, settings.resolve_deploy_dir(), settings.archive_filename)
                if settings.no_emit:
                    logger.info("no_emit set; skipping upload of %s", archive.relative_path)
                else:
                    await self.uploader.upload(archive)
                self.progress.increment(1)
            finally:
                self.progress.stop()

            logger.info("Published %d files for key %s", len(files), key)
            return PublishResult(report_url=report_url, archive=archive, file_count=len(files))

    async def fetch(
        self,
        key: str,
        target: Optional[TransferTarget] = None,
    ) -> FetchResult:
        """Restore the archive published for key.

        Returns an empty FetchResult when no_emit is set (before any network
        call) or when no matching build or artifact exists.
        """
        settings = self.settings
        if settings.no_emit:
            return FetchResult()

        with bind_transfer_key(key):
            resolver = ArtifactResolver(
                self.client,
                settings.resolve_app_slug(),
                success_filter=settings.success_filter,
            )
            info = await resolver.resolve(key, settings.artifact_name, settings.success_only)
            if info is None:
                logger.info("No artifact published for key %s; nothing to restore", key)
                return FetchResult()

            if target is None:
                target = TransferTarget(
                    root_directory=str(settings.working_dirs().expected_dir),
                    path_prefix_to_strip=settings.path_prefix_to_strip,
                )

            self.progress.start(1)
            try:
                blob = await self.transport.download(info.download_url)
                entries = unpack(blob, archive_name=info.artifact.title or info.artifact.slug)
                written = write(entries, target)
                self.progress.increment(1)
            finally:
                self.progress.stop()

            logger.info(
                "Restored %d files from build %s into %s",
                len(written), info.build.slug, target.root_directory,
            )
            return FetchResult(target=target, written=written, download=info)
