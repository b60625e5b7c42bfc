"""Tests for the Bitrise API client.

httpx.AsyncClient is mocked so tests run without real network calls.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from bitrise_publisher.bitrise.client import BitriseClient
from bitrise_publisher.bitrise.types import BuildStatus
from bitrise_publisher.core.config import Settings


def _make_response(status_code: int, json_data: dict) -> MagicMock:
    """Build a minimal mock httpx.Response."""
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = json_data

    def raise_for_status():
        if status_code >= 400:
            raise httpx.HTTPStatusError(
                f"HTTP {status_code}",
                request=MagicMock(),
                response=MagicMock(status_code=status_code),
            )

    resp.raise_for_status = raise_for_status
    return resp


@pytest.fixture
def client():
    return BitriseClient(base_url="https://api.bitrise.io/v0.1/", api_key="tok")


def _patched(mock_resp):
    patcher = patch("bitrise_publisher.bitrise.client.httpx.AsyncClient")
    MockClient = patcher.start()
    MockClient.return_value.__aenter__ = AsyncMock(return_value=MockClient.return_value)
    MockClient.return_value.__aexit__ = AsyncMock(return_value=False)
    MockClient.return_value.get = AsyncMock(return_value=mock_resp)
    return patcher, MockClient


class TestListBuilds:
    @pytest.mark.asyncio
    async def test_parses_builds_and_cursor(self, client):
        mock_resp = _make_response(200, {
            "data": [
                {"slug": "b1", "commit_hash": "abc123", "status": 1},
                {"slug": "b2", "commit_hash": None, "status": 2},
            ],
            "paging": {"next": "b3", "page_item_limit": 2},
        })
        patcher, _ = _patched(mock_resp)
        try:
            page = await client.list_builds("app-1")
        finally:
            patcher.stop()

        assert [b.slug for b in page.items] == ["b1", "b2"]
        assert page.items[0].status is BuildStatus.SUCCESS
        assert page.items[1].status is BuildStatus.OTHER
        assert page.items[1].commit_hash == ""
        assert page.next_cursor == "b3"

    @pytest.mark.asyncio
    async def test_sends_status_and_cursor_params(self, client):
        mock_resp = _make_response(200, {"data": [], "paging": {}})
        patcher, MockClient = _patched(mock_resp)
        try:
            await client.list_builds("app-1", status=1, cursor="next-token")
        finally:
            patcher.stop()

        call = MockClient.return_value.get.call_args
        assert call.args[0] == "/apps/app-1/builds"
        assert call.kwargs["params"] == {"status": 1, "next": "next-token"}
        assert call.kwargs["headers"]["Authorization"] == "tok"

    @pytest.mark.asyncio
    async def test_omits_params_when_unset(self, client):
        mock_resp = _make_response(200, {"data": []})
        patcher, MockClient = _patched(mock_resp)
        try:
            page = await client.list_builds("app-1")
        finally:
            patcher.stop()

        assert MockClient.return_value.get.call_args.kwargs["params"] == {}
        assert page.items == []
        assert page.next_cursor is None

    @pytest.mark.asyncio
    async def test_base_url_trailing_slash_stripped(self, client):
        mock_resp = _make_response(200, {"data": []})
        patcher, MockClient = _patched(mock_resp)
        try:
            await client.list_builds("app-1")
        finally:
            patcher.stop()

        assert MockClient.call_args.kwargs["base_url"] == "https://api.bitrise.io/v0.1"

    @pytest.mark.asyncio
    async def test_http_error_propagates(self, client):
        mock_resp = _make_response(401, {"message": "Unauthorized"})
        patcher, _ = _patched(mock_resp)
        try:
            with pytest.raises(httpx.HTTPStatusError):
                await client.list_builds("app-1")
        finally:
            patcher.stop()


class TestListArtifacts:
    @pytest.mark.asyncio
    async def test_parses_summaries_without_download_url(self, client):
        mock_resp = _make_response(200, {
            "data": [{"slug": "a1", "title": "artifact.zip", "artifact_type": "file"}],
            "paging": {"next": None},
        })
        patcher, MockClient = _patched(mock_resp)
        try:
            page = await client.list_artifacts("app-1", "b1")
        finally:
            patcher.stop()

        assert page.items[0].slug == "a1"
        assert page.items[0].title == "artifact.zip"
        assert not hasattr(page.items[0], "download_url")
        assert page.next_cursor is None
        assert MockClient.return_value.get.call_args.args[0] == "/apps/app-1/builds/b1/artifacts"


class TestShowArtifact:
    @pytest.mark.asyncio
    async def test_returns_expiring_download_url(self, client):
        mock_resp = _make_response(200, {
            "data": {
                "slug": "a1",
                "title": "artifact.zip",
                "expiring_download_url": "https://storage.example/a1?sig=x",
            },
        })
        patcher, MockClient = _patched(mock_resp)
        try:
            detail = await client.show_artifact("app-1", "b1", "a1")
        finally:
            patcher.stop()

        assert detail.download_url == "https://storage.example/a1?sig=x"
        assert detail.title == "artifact.zip"
        assert MockClient.return_value.get.call_args.args[0] == "/apps/app-1/builds/b1/artifacts/a1"

    @pytest.mark.asyncio
    async def test_missing_url_becomes_empty_string(self, client):
        mock_resp = _make_response(200, {"data": {"slug": "a1", "title": "artifact.zip"}})
        patcher, _ = _patched(mock_resp)
        try:
            detail = await client.show_artifact("app-1", "b1", "a1")
        finally:
            patcher.stop()

        assert detail.download_url == ""


class TestFromSettings:
    def test_uses_settings_values(self):
        settings = Settings(
            _env_file=None,
            bitrise_api_key="secret",
            bitrise_api_base_url="https://bitrise.test/v0.1/",
            request_timeout=5,
        )
        client = BitriseClient.from_settings(settings)
        assert client.base_url == "https://bitrise.test/v0.1"
        assert client.timeout == 5
