"""Reading exclusion patterns from ignore files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Sequence, Tuple, Union

logger = logging.getLogger("rift.ignore")

DEFAULT_IGNORE_FILE = ".gitignore"
ALWAYS_EXCLUDE: Tuple[str, ...] = (".git",)


def parse_ignore_file(path: Union[str, Path]) -> List[str]:
    """Return the usable patterns of an ignore file, in file order.

    Blank lines, ``#`` comments and ``!`` negations are dropped; negation is
    not supported by the matcher. Bytes that are not valid UTF-8 are kept
    with ``surrogateescape``, the way the filesystem decodes file names.
    Raises ``OSError`` if the file cannot be read.
    """

    patterns: List[str] = []
    with open(path, "r", encoding="utf-8", errors="surrogateescape") as handle:
        for raw in handle:
            line = raw.strip()
            if not line or line.startswith("#"):
                continue
            if line.startswith("!"):
                logger.debug("Ignoring negated pattern %r in %s", line, path)
                continue
            patterns.append(line)
    return patterns


def collect_patterns(
    source_root: Union[str, Path],
    extra: Iterable[str] = (),
    *,
    ignore_file: str = DEFAULT_IGNORE_FILE,
    always_exclude: Sequence[str] = ALWAYS_EXCLUDE,
) -> Tuple[str, ...]:
    """Build the ordered pattern set handed to the sync engine.

    Always-excluded names come first, then the ignore file's patterns, then
    ``extra``. An ignore file that is missing or unreadable contributes
    nothing.
    """

    patterns: List[str] = list(always_exclude)

    if ignore_file:
        ignore_path = Path(source_root) / ignore_file
        try:
            file_patterns = parse_ignore_file(ignore_path)
        except FileNotFoundError:
            logger.debug("No ignore file at %s", ignore_path)
        except OSError as exc:
            logger.warning("Skipping unreadable ignore file %s: %s", ignore_path, exc)
        else:
            logger.debug("Loaded %d pattern(s) from %s", len(file_patterns), ignore_path)
            patterns.extend(file_patterns)

    patterns.extend(pattern for pattern in extra if pattern)
    return tuple(patterns)


__all__ = ["ALWAYS_EXCLUDE", "DEFAULT_IGNORE_FILE", "collect_patterns", "parse_ignore_file"]
