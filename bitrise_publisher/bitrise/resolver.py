"""Artifact resolver — finds the archive published for a given key.

Resolution walks two nested cursor-paginated collections:

1. The app's builds, taking the first whose commit hash starts with the
   leading segment of the key.
2. That build's artifacts, taking the first whose title starts with the
   artifact name.

Both searches stop at the first match. Only the matched artifact is
"shown" to obtain its download URL; rejected candidates cost nothing
beyond their listing page.

Not finding a build or an artifact is a normal outcome (for example the
first run on a new branch) and yields None rather than an error.
"""

import logging
from functools import partial
from typing import Literal, Optional, Protocol

from bitrise_publisher.bitrise.pagination import find_first
from bitrise_publisher.bitrise.types import (
    BITRISE_STATUS_SUCCESS,
    ArtifactDetail,
    ArtifactDownloadInfo,
    ArtifactSummary,
    BuildRecord,
    RemotePage,
)

logger = logging.getLogger(__name__)

SuccessFilter = Literal["request", "client"]


class ArtifactSource(Protocol):
    """The subset of BitriseClient the resolver depends on."""

    async def list_builds(
        self,
        app_slug: str,
        status: Optional[int] = None,
        cursor: Optional[str] = None,
    ) -> RemotePage[BuildRecord]: ...

    async def list_artifacts(
        self,
        app_slug: str,
        build_slug: str,
        cursor: Optional[str] = None,
    ) -> RemotePage[ArtifactSummary]: ...

    async def show_artifact(
        self,
        app_slug: str,
        build_slug: str,
        artifact_slug: str,
    ) -> ArtifactDetail: ...


def build_key_prefix(key: str) -> str:
    """Return the part of key before its first "/".

    "abcdef1234/linux" -> "abcdef1234"; a key without "/" is returned whole.
    """
    return key.split("/", 1)[0]


class ArtifactResolver:
    def __init__(
        self,
        client: ArtifactSource,
        app_slug: str,
        success_filter: SuccessFilter = "request",
    ) -> None:
        if success_filter not in ("request", "client"):
            raise ValueError(f"Unknown success_filter: {success_filter!r}")
        self.client = client
        self.app_slug = app_slug
        self.success_filter = success_filter

    async def resolve(
        self,
        key: str,
        artifact_name_prefix: str,
        success_only: bool,
    ) -> Optional[ArtifactDownloadInfo]:
        """Find the artifact for key, or None if there is none.

        With success_only, builds that did not succeed are never matched.
        success_filter="request" asks Bitrise to list successful builds
        only; "client" lists every build and skips the rest locally.
        """
        prefix = build_key_prefix(key)

        build = await self._find_build(prefix, success_only)
        if build is None:
            logger.info("No build found for commit prefix %s", prefix)
            return None

        summary = await find_first(
            partial(self._artifact_page, build.slug),
            lambda a: a.title.startswith(artifact_name_prefix),
        )
        if summary is None:
            logger.info(
                "Build %s has no artifact titled %s*", build.slug, artifact_name_prefix,
            )
            return None

        detail = await self.client.show_artifact(self.app_slug, build.slug, summary.slug)
        if not detail.download_url:
            logger.warning(
                "Artifact %s of build %s has no download URL", summary.slug, build.slug,
            )
            return None

        logger.info("Resolved artifact %s (%s) from build %s", detail.slug, detail.title, build.slug)
        return ArtifactDownloadInfo(build=build, artifact=detail)

    async def _find_build(self, prefix: str, success_only: bool) -> Optional[BuildRecord]:
        status: Optional[int] = None
        if success_only and self.success_filter == "request":
            status = BITRISE_STATUS_SUCCESS

        def accept(build: BuildRecord) -> bool:
            if success_only and not build.is_success:
                return False
            return build.commit_hash.startswith(prefix)

        return await find_first(partial(self._build_page, status), accept)

    async def _build_page(
        self,
        status: Optional[int],
        cursor: Optional[str],
    ) -> RemotePage[BuildRecord]:
        return await self.client.list_builds(self.app_slug, status=status, cursor=cursor)

    async def _artifact_page(
        self,
        build_slug: str,
        cursor: Optional[str],
    ) -> RemotePage[ArtifactSummary]:
        return await self.client.list_artifacts(self.app_slug, build_slug, cursor=cursor)
