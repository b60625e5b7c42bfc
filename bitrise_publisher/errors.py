"""Error types raised by the publisher.

Local disk and archive failures are wrapped with the failing path or archive
name. Remote failures are not wrapped: httpx errors from the listing,
download and upload calls reach the caller as they were raised.

A missing build or artifact is not an error. The resolver returns None and
the orchestrator reports an empty fetch.
"""

import httpx

# Listing, download and upload failures surface as httpx errors unchanged.
RemoteCallError = httpx.HTTPError


class TransferIOError(OSError):
    """Raised when a local file cannot be read or written."""

    def __init__(self, message: str, path: str) -> None:
        super().__init__(f"{message}: {path}")
        self.path = path


class CorruptArchiveError(Exception):
    """Raised when downloaded bytes are not a readable zip archive."""

    def __init__(self, message: str, archive_name: str) -> None:
        super().__init__(f"{message} ({archive_name})")
        self.archive_name = archive_name


class NotFoundError(Exception):
    """Raised when a required setting (such as the app slug) is missing."""
