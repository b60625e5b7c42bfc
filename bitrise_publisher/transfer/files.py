"""Local file enumeration for publish.

Globs the working directory with a brace-aware pattern such as
"**/*.{html,png}" (pathlib's glob has no brace support, so alternatives
are expanded first) and returns LocalFile records sorted by relative path.
"""

import logging
import mimetypes
from pathlib import Path

from bitrise_publisher.archive.types import LocalFile

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"


def expand_braces(pattern: str) -> list[str]:
    """Expand "{a,b}" alternatives into separate glob patterns.

    "**/*.{html,js}" -> ["**/*.html", "**/*.js"]. Nested groups are
    expanded recursively; unbalanced braces are left as literal text.
    """
    start = pattern.find("{")
    if start == -1:
        return [pattern]

    depth = 0
    options: list[str] = []
    last = start + 1
    for i in range(start, len(pattern)):
        ch = pattern[i]
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                options.append(pattern[last:i])
                head, tail = pattern[:start], pattern[i + 1:]
                expanded: list[str] = []
                for option in options:
                    for rest in expand_braces(option + tail):
                        expanded.append(head + rest)
                return expanded
        elif ch == "," and depth == 1:
            options.append(pattern[last:i])
            last = i + 1

    return [pattern]


def collect_local_files(root: str | Path, pattern: str) -> list[LocalFile]:
    """Return every regular file under root matching pattern."""
    root_path = Path(root)
    if not root_path.is_dir():
        logger.warning("Working directory %s does not exist; nothing to collect", root_path)
        return []

    found: dict[str, Path] = {}
    for glob in expand_braces(pattern):
        for path in root_path.glob(glob):
            if path.is_file():
                found.setdefault(path.relative_to(root_path).as_posix(), path)

    files = [
        LocalFile(
            relative_path=relative,
            absolute_path=str(path.resolve()),
            content_type=mimetypes.guess_type(path.name)[0] or DEFAULT_CONTENT_TYPE,
        )
        for relative, path in sorted(found.items())
    ]
    logger.info("Collected %d files from %s", len(files), root_path)
    return files
