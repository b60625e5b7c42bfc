"""Bitrise API client for build and artifact lookups.

Uses httpx for async HTTP calls. All methods are app-scoped and
authenticate with a personal access token.

Three operations are needed to resolve an artifact:
1. List an app's builds (optionally only successful ones)
2. List a build's artifacts
3. Show one artifact to obtain its expiring download URL

Listings are cursor-paginated: each response carries ``paging.next``,
which is passed back as the ``next`` query parameter. A missing value
marks the last page.
"""

import logging
from typing import Optional

import httpx

from bitrise_publisher.bitrise.types import (
    ArtifactDetail,
    ArtifactSummary,
    BuildRecord,
    BuildStatus,
    RemotePage,
)
from bitrise_publisher.core.config import Settings

logger = logging.getLogger(__name__)

API_TIMEOUT = 30


class BitriseClient:
    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = API_TIMEOUT,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._api_key = api_key
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "BitriseClient":
        return cls(
            base_url=settings.bitrise_api_base_url,
            api_key=settings.bitrise_api_key,
            timeout=settings.request_timeout,
        )

    async def list_builds(
        self,
        app_slug: str,
        status: Optional[int] = None,
        cursor: Optional[str] = None,
    ) -> RemotePage[BuildRecord]:
        """GET /apps/{app_slug}/builds

        *status* is Bitrise's numeric build status; pass 1 to list only
        successful builds.
        """
        params: dict = {}
        if status is not None:
            params["status"] = status
        if cursor:
            params["next"] = cursor

        body = await self._get(f"/apps/{app_slug}/builds", params)
        builds = [
            BuildRecord(
                slug=item["slug"],
                commit_hash=item.get("commit_hash") or "",
                status=BuildStatus.from_code(item.get("status")),
            )
            for item in body.get("data") or []
        ]
        return RemotePage(items=builds, next_cursor=_next_cursor(body))

    async def list_artifacts(
        self,
        app_slug: str,
        build_slug: str,
        cursor: Optional[str] = None,
    ) -> RemotePage[ArtifactSummary]:
        """GET /apps/{app_slug}/builds/{build_slug}/artifacts"""
        params: dict = {}
        if cursor:
            params["next"] = cursor

        body = await self._get(f"/apps/{app_slug}/builds/{build_slug}/artifacts", params)
        artifacts = [
            ArtifactSummary(slug=item["slug"], title=item.get("title") or "")
            for item in body.get("data") or []
        ]
        return RemotePage(items=artifacts, next_cursor=_next_cursor(body))

    async def show_artifact(
        self,
        app_slug: str,
        build_slug: str,
        artifact_slug: str,
    ) -> ArtifactDetail:
        """GET /apps/{app_slug}/builds/{build_slug}/artifacts/{artifact_slug}

        The download URL is pre-signed and expires after a few minutes, so
        fetch it right before downloading.
        """
        body = await self._get(
            f"/apps/{app_slug}/builds/{build_slug}/artifacts/{artifact_slug}",
            {},
        )
        data = body.get("data") or {}
        return ArtifactDetail(
            slug=data.get("slug") or artifact_slug,
            title=data.get("title") or "",
            download_url=data.get("expiring_download_url") or "",
        )

    async def _get(self, path: str, params: dict) -> dict:
        async with httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
        ) as client:
            response = await client.get(
                path,
                headers=self._auth_headers(),
                params=params,
            )
            response.raise_for_status()
            return response.json()

    def _auth_headers(self) -> dict[str, str]:
        return {
            "Authorization": self._api_key,
            "Accept": "application/json",
        }


def _next_cursor(body: dict) -> Optional[str]:
    paging = body.get("paging") or {}
    return paging.get("next") or None
