"""Blob transport — raw archive download and upload over HTTP.

Download URLs handed out by Bitrise are pre-signed storage URLs that
redirect, so redirects are followed. Failures are raised as httpx errors
and never retried here.
"""

import logging

import httpx

logger = logging.getLogger(__name__)

TRANSFER_TIMEOUT = 120


class BlobTransport:
    def __init__(self, timeout: float = TRANSFER_TIMEOUT) -> None:
        self.timeout = timeout

    async def download(self, url: str) -> bytes:
        async with httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
        ) as client:
            response = await client.get(url)
            response.raise_for_status()
            data = response.content

        logger.debug("Downloaded %d bytes", len(data))
        return data

    async def upload(self, url: str, data: bytes, content_type: str) -> None:
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.put(
                url,
                content=data,
                headers={"Content-Type": content_type},
            )
            response.raise_for_status()

        logger.debug("Uploaded %d bytes (%s)", len(data), content_type)
