"""Transfer module: publish and fetch of the report archive.

Public API:
    TransferOrchestrator(settings).publish(key) -> PublishResult
    TransferOrchestrator(settings).fetch(key) -> FetchResult
    collect_local_files(root, pattern) -> list[LocalFile]
"""

from bitrise_publisher.transfer.files import collect_local_files, expand_braces
from bitrise_publisher.transfer.orchestrator import (
    DeployDirUploader,
    HttpUploader,
    TransferOrchestrator,
)
from bitrise_publisher.transfer.progress import NullProgress, ProgressReporter, TqdmProgress
from bitrise_publisher.transfer.types import FetchResult, PublishResult

__all__ = [
    "TransferOrchestrator",
    "DeployDirUploader",
    "HttpUploader",
    "collect_local_files",
    "expand_braces",
    "NullProgress",
    "ProgressReporter",
    "TqdmProgress",
    "FetchResult",
    "PublishResult",
]
