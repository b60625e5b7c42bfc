"""Bitrise API access and artifact resolution.

Public API:
    BitriseClient(base_url, api_key) — builds/artifacts listing and show
    BlobTransport() — archive download/upload
    find_first(fetch_page, accept) -> item | None
    ArtifactResolver(client, app_slug).resolve(key, name, success_only)
"""

from bitrise_publisher.bitrise.client import BitriseClient
from bitrise_publisher.bitrise.pagination import find_first
from bitrise_publisher.bitrise.resolver import ArtifactResolver, build_key_prefix
from bitrise_publisher.bitrise.transport import BlobTransport
from bitrise_publisher.bitrise.types import (
    ArtifactDetail,
    ArtifactDownloadInfo,
    ArtifactSummary,
    BuildRecord,
    BuildStatus,
    RemotePage,
)

__all__ = [
    "BitriseClient",
    "BlobTransport",
    "find_first",
    "ArtifactResolver",
    "build_key_prefix",
    "ArtifactDetail",
    "ArtifactDownloadInfo",
    "ArtifactSummary",
    "BuildRecord",
    "BuildStatus",
    "RemotePage",
]
