"""Types for the Bitrise API layer.

Artifacts come in two shapes. The listing endpoint returns ArtifactSummary
records without a download URL; only the per-artifact "show" endpoint
returns an ArtifactDetail carrying the expiring download URL.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")

# Bitrise build status codes: 0 in progress, 1 success, 2 failed, 3 aborted.
BITRISE_STATUS_SUCCESS = 1


class BuildStatus(str, Enum):
    SUCCESS = "success"
    OTHER = "other"

    @classmethod
    def from_code(cls, code: Optional[int]) -> "BuildStatus":
        return cls.SUCCESS if code == BITRISE_STATUS_SUCCESS else cls.OTHER


@dataclass(frozen=True)
class RemotePage(Generic[T]):
    """One page of a cursor-paginated listing.

    next_cursor is None on the last page.
    """

    items: list[T] = field(default_factory=list)
    next_cursor: Optional[str] = None


@dataclass(frozen=True)
class BuildRecord:
    slug: str
    commit_hash: str
    status: BuildStatus

    @property
    def is_success(self) -> bool:
        return self.status is BuildStatus.SUCCESS


@dataclass(frozen=True)
class ArtifactSummary:
    slug: str
    title: str


@dataclass(frozen=True)
class ArtifactDetail:
    slug: str
    title: str
    download_url: str


@dataclass(frozen=True)
class ArtifactDownloadInfo:
    """The resolved artifact and the build it belongs to."""

    build: BuildRecord
    artifact: ArtifactDetail

    @property
    def download_url(self) -> str:
        return self.artifact.download_url
