"""Archive codec — packs local files into one zip and back.

pack() reads every file and builds the zip in memory. Entries are written
in sorted name order with a fixed timestamp and mode, so the same set of
(path, bytes) pairs always yields the same archive bytes regardless of
input order or file mtimes.

unpack() returns the archive's entries as a {relative path: bytes} mapping.
Directory entries are skipped; an archive with no entries gives {}.
"""

import io
import logging
import zipfile
import zlib
from collections.abc import Sequence
from pathlib import Path

from bitrise_publisher.archive.types import ZIP_CONTENT_TYPE, LocalFile
from bitrise_publisher.errors import CorruptArchiveError, TransferIOError

logger = logging.getLogger(__name__)

# Earliest timestamp the zip format can store.
_FIXED_DATE_TIME = (1980, 1, 1, 0, 0, 0)
_FILE_MODE = 0o644 << 16


def pack(entries: Sequence[LocalFile]) -> bytes:
    """Read each file and bundle them into a single zip archive.

    Raises:
        TransferIOError: If any source file cannot be read.
        ValueError: If two entries share a relative path.
    """
    contents: dict[str, bytes] = {}
    for entry in entries:
        name = entry.relative_path.replace("\\", "/")
        if name in contents:
            raise ValueError(f"Duplicate archive entry: {name!r}")
        contents[name] = _read_source(entry.absolute_path)

    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, mode="w", compression=zipfile.ZIP_DEFLATED) as archive:
        for name in sorted(contents):
            info = zipfile.ZipInfo(filename=name, date_time=_FIXED_DATE_TIME)
            info.compress_type = zipfile.ZIP_DEFLATED
            info.external_attr = _FILE_MODE
            archive.writestr(info, contents[name])

    blob = buffer.getvalue()
    logger.debug("Packed %d entries into %d bytes", len(contents), len(blob))
    return blob


def unpack(blob: bytes, archive_name: str = "<memory>") -> dict[str, bytes]:
    """Decode a zip archive into a mapping of entry name to raw bytes.

    Raises:
        CorruptArchiveError: If the bytes are not a valid zip archive or an
            entry fails its CRC check.
    """
    entries: dict[str, bytes] = {}
    # NotImplementedError: unsupported compression method; RuntimeError: encrypted entry.
    try:
        with zipfile.ZipFile(io.BytesIO(blob)) as archive:
            for info in archive.infolist():
                if info.is_dir():
                    continue
                entries[info.filename] = archive.read(info)
    except (zipfile.BadZipFile, zlib.error, EOFError, NotImplementedError, RuntimeError) as exc:
        raise CorruptArchiveError(f"Invalid zip archive: {exc}", archive_name) from exc

    logger.debug("Unpacked %d entries from %s", len(entries), archive_name)
    return entries


def write_archive(
    entries: Sequence[LocalFile],
    directory: str | Path,
    filename: str,
) -> LocalFile:
    """Pack entries and write the archive to directory/filename.

    Returns a LocalFile for the archive itself, ready to hand to an
    uploader.
    """
    blob = pack(entries)
    target = Path(directory) / filename
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(blob)
    except OSError as exc:
        raise TransferIOError(f"Cannot write archive ({exc.strerror})", str(target)) from exc

    logger.info("Wrote %s (%d files, %d bytes)", target, len(entries), len(blob))
    return LocalFile(
        relative_path=filename,
        absolute_path=str(target),
        content_type=ZIP_CONTENT_TYPE,
    )


def _read_source(path: str) -> bytes:
    try:
        return Path(path).read_bytes()
    except OSError as exc:
        raise TransferIOError(f"Cannot read file ({exc.strerror})", path) from exc
