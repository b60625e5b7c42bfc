"""Filesystem materializer — writes unpacked archive entries to disk.

Each entry is resolved under the target root after optional prefix
stripping. Missing parent directories are created and existing files are
overwritten; nothing is ever deleted.

Writes are not atomic: if entry N fails, entries 0..N-1 stay on disk.

Security:
  - `_validate_entry_path()` rejects names containing `..` components,
    absolute paths and null bytes before anything is written, so a hostile
    archive cannot escape the target root.
"""

import logging
import os
from collections.abc import Mapping
from pathlib import Path, PurePosixPath
from typing import Optional

from bitrise_publisher.archive.types import TransferTarget
from bitrise_publisher.errors import TransferIOError

logger = logging.getLogger(__name__)

_SEPARATORS = {"/", os.sep}


def strip_prefix(relative_path: str, prefix: Optional[str]) -> str:
    """Remove prefix from relative_path when followed by a path separator.

    "myproject/report/index.html" with prefix "myproject" becomes
    "report/index.html"; "myprojectX/a.txt" is returned unchanged.
    """
    if not prefix:
        return relative_path
    prefix = prefix.rstrip("/" + os.sep)
    if not prefix:
        return relative_path
    if (
        len(relative_path) > len(prefix)
        and relative_path.startswith(prefix)
        and relative_path[len(prefix)] in _SEPARATORS
    ):
        return relative_path[len(prefix) + 1:]
    return relative_path


def _validate_entry_path(path: str) -> None:
    """Reject entry names that could resolve outside the target root.

    Raises:
        ValueError: If the name is empty, absolute, or contains `..`
            components or null bytes.
    """
    if not path:
        raise ValueError("Archive entry name must not be empty")
    if "\x00" in path:
        raise ValueError(f"Invalid archive entry — null byte detected: {path!r}")
    normalised = path.replace("\\", "/")
    if normalised.startswith("/") or PurePosixPath(normalised).is_absolute() or os.path.isabs(path):
        raise ValueError(f"Invalid archive entry — absolute path: {path!r}")
    if ".." in PurePosixPath(normalised).parts:
        raise ValueError(f"Invalid archive entry — path traversal detected: {path!r}")


def write(entries: Mapping[str, bytes], target: TransferTarget) -> list[Path]:
    """Write every entry under target.root_directory.

    Returns the paths written, in entry order.

    Raises:
        ValueError: If an entry name is unsafe. Raised before any write.
        TransferIOError: If a directory or file cannot be written.
    """
    root = Path(target.root_directory)
    plan: list[tuple[Path, bytes]] = []
    for name, data in entries.items():
        relative = strip_prefix(name, target.path_prefix_to_strip)
        _validate_entry_path(relative)
        plan.append((root / relative, data))

    written: list[Path] = []
    for destination, data in plan:
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            destination.write_bytes(data)
        except OSError as exc:
            raise TransferIOError(
                f"Cannot write file ({exc.strerror})", str(destination)
            ) from exc
        written.append(destination)

    logger.info("Materialized %d files under %s", len(written), root)
    return written
