"""Gitignore-style exclusion pattern matching."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterable, List, Optional, Pattern, Tuple

SEPARATOR = "/"
DOUBLE_STAR_PREFIX = "**/"


@dataclass(frozen=True)
class ExclusionPattern:
    """A single exclusion rule as it appears in an ignore file.

    The raw text is the only stored state; ``dir_only``, ``double_star_prefixed``
    and ``rooted`` are derived each time they are read.
    """

    raw: str

    @property
    def normalized(self) -> str:
        return to_slash(self.raw)

    @property
    def dir_only(self) -> bool:
        return self.normalized.endswith(SEPARATOR)

    @property
    def body(self) -> str:
        """Pattern text with the directory-only marker removed."""
        text = self.normalized
        if text.endswith(SEPARATOR):
            text = text[: -len(SEPARATOR)]
        return text

    @property
    def double_star_prefixed(self) -> bool:
        return self.body.startswith(DOUBLE_STAR_PREFIX)

    @property
    def rooted(self) -> bool:
        return not self.double_star_prefixed and SEPARATOR in self.body

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        """Return True when ``rel_path`` (relative to the tree root) matches."""

        if self.dir_only and not is_dir:
            return False

        rel_path = to_slash(rel_path)
        pattern = self.body
        parts = rel_path.split(SEPARATOR)

        if pattern.startswith(DOUBLE_STAR_PREFIX):
            suffix = pattern[len(DOUBLE_STAR_PREFIX):]
            for index, part in enumerate(parts):
                if glob_match(suffix, SEPARATOR.join(parts[index:])):
                    return True
                if glob_match(suffix, part):
                    return True
            return False

        if SEPARATOR not in pattern:
            if glob_match(pattern, parts[-1]):
                return True
            return any(glob_match(pattern, part) for part in parts)

        if pattern.startswith(SEPARATOR):
            pattern = pattern[len(SEPARATOR):]
        return glob_match(pattern, rel_path)


def to_slash(path: str) -> str:
    """Replace the host's path separators with forward slashes.

    On POSIX a backslash is an ordinary filename character and is kept.
    """

    for separator in (os.sep, os.altsep):
        if separator and separator != SEPARATOR:
            path = path.replace(separator, SEPARATOR)
    return path


def glob_match(pattern: str, name: str) -> bool:
    """Shell-style match where wildcards never cross a ``/`` boundary.

    Pattern and name are compared component by component, so both must have
    the same number of segments. Matching is case-sensitive. A backslash
    makes the next character literal. A malformed pattern (unclosed or empty
    bracket class, dangling backslash) never matches.
    """

    compiled = [_compile_component(glob) for glob in pattern.split(SEPARATOR)]
    if any(regex is None for regex in compiled):
        return False
    name_parts = name.split(SEPARATOR)
    if len(compiled) != len(name_parts):
        return False
    return all(
        regex.fullmatch(part) is not None
        for regex, part in zip(compiled, name_parts)
    )


@lru_cache(maxsize=512)
def _compile_component(glob: str) -> Optional[Pattern[str]]:
    """Translate one component glob to a compiled regex, None when malformed."""

    out: List[str] = []
    index = 0
    while index < len(glob):
        char = glob[index]
        index += 1
        if char == "*":
            out.append(".*")
        elif char == "?":
            out.append(".")
        elif char == "\\":
            if index == len(glob):
                return None
            out.append(re.escape(glob[index]))
            index += 1
        elif char == "[":
            parsed = _parse_class(glob, index)
            if parsed is None:
                return None
            expression, index = parsed
            out.append(expression)
        else:
            out.append(re.escape(char))
    return re.compile("".join(out), re.DOTALL)


def _parse_class(glob: str, index: int) -> Optional[Tuple[str, int]]:
    """Parse a bracket class whose ``[`` sits just before ``index``.

    ``^`` and ``!`` both negate. Returns the regex and the index after ``]``.
    """

    negate = index < len(glob) and glob[index] in "^!"
    if negate:
        index += 1

    items: List[str] = []
    seen_item = False
    while True:
        if index >= len(glob):
            return None
        if glob[index] == "]" and seen_item:
            index += 1
            break
        low, index = _class_char(glob, index)
        if low is None:
            return None
        high = low
        if index < len(glob) and glob[index] == "-":
            high, index = _class_char(glob, index + 1)
            if high is None:
                return None
        seen_item = True
        if low == high:
            items.append(re.escape(low))
        elif low < high:
            items.append(f"{re.escape(low)}-{re.escape(high)}")
        # an inverted range such as z-a contributes nothing

    if not items:
        return (".", index) if negate else ("(?!)", index)
    body = "".join(items)
    return (f"[^{body}]" if negate else f"[{body}]"), index


def _class_char(glob: str, index: int) -> Tuple[Optional[str], int]:
    if index >= len(glob) or glob[index] in "-]":
        return None, index
    if glob[index] == "\\":
        index += 1
        if index >= len(glob):
            return None, index
    return glob[index], index + 1


def match_pattern(rel_path: str, pattern: str, is_dir: bool) -> bool:
    """Return True when ``rel_path`` matches the single exclusion ``pattern``."""
    return ExclusionPattern(pattern).matches(rel_path, is_dir)


def should_exclude(rel_path: str, patterns: Iterable[str], is_dir: bool) -> bool:
    """Return True when any pattern in ``patterns`` matches ``rel_path``."""

    rel_path = to_slash(rel_path)
    for pattern in patterns:
        if match_pattern(rel_path, pattern, is_dir):
            return True
    return False


__all__ = [
    "ExclusionPattern",
    "glob_match",
    "match_pattern",
    "should_exclude",
    "to_slash",
]
