"""Archive module for packing and restoring directory trees.

Public API:
    pack(entries) -> bytes
    unpack(blob) -> dict[str, bytes]
    write_archive(entries, directory, filename) -> LocalFile
    write(entries, target) -> list[Path]
"""

from bitrise_publisher.archive.codec import pack, unpack, write_archive
from bitrise_publisher.archive.materializer import strip_prefix, write
from bitrise_publisher.archive.types import LocalFile, TransferTarget

__all__ = [
    "pack",
    "unpack",
    "write_archive",
    "strip_prefix",
    "write",
    "LocalFile",
    "TransferTarget",
]
