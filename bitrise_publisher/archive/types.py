"""Types for the archive module."""

from dataclasses import dataclass
from typing import Optional

ZIP_CONTENT_TYPE = "application/zip"


@dataclass(frozen=True)
class LocalFile:
    """A file on local disk, addressed by its path inside the archive.

    relative_path always uses "/" separators, whatever the host OS.
    """

    relative_path: str
    absolute_path: str
    content_type: str


@dataclass(frozen=True)
class TransferTarget:
    """Where an unpacked archive is written.

    When path_prefix_to_strip is set, entries starting with that prefix and
    a separator lose the prefix before being resolved against
    root_directory. Other entries are written as-is.
    """

    root_directory: str
    path_prefix_to_strip: Optional[str] = None
