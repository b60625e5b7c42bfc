"""Types for the transfer orchestrator."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from bitrise_publisher.archive.types import LocalFile, TransferTarget
from bitrise_publisher.bitrise.types import ArtifactDownloadInfo


@dataclass
class PublishResult:
    """Outcome of a publish.

    An empty working directory still yields an archive, with no entries.
    """

    report_url: str
    archive: Optional[LocalFile] = None
    file_count: int = 0

    def to_dict(self) -> dict:
        return {
            "report_url": self.report_url,
            "archive": self.archive.absolute_path if self.archive else None,
            "file_count": self.file_count,
        }


@dataclass
class FetchResult:
    """Outcome of a fetch.

    An empty result (no target, nothing written) means there was nothing to
    restore: no matching build or artifact, or no_emit was set.
    """

    target: Optional[TransferTarget] = None
    written: list[Path] = field(default_factory=list)
    download: Optional[ArtifactDownloadInfo] = None

    @property
    def is_empty(self) -> bool:
        return self.target is None

    def to_dict(self) -> dict:
        return {
            "root_directory": self.target.root_directory if self.target else None,
            "files": [str(p) for p in self.written],
            "build_slug": self.download.build.slug if self.download else None,
            "artifact_slug": self.download.artifact.slug if self.download else None,
        }
