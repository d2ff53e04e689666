"""Segment-wise glob matching of compiled patterns against relative paths."""

from __future__ import annotations

import re
from collections.abc import Sequence
from functools import cache

from promptpacker.ignore.patterns import DOUBLE_STAR, Pattern


def _translate(glob: str) -> str:
    """
    Translate one segment glob to a regular expression. A backslash makes the
    next character literal, also inside `[...]`. An unterminated `[` is literal.
    """
    out: list[str] = []
    i, n = 0, len(glob)
    while i < n:
        c = glob[i]
        i += 1
        if c == "\\" and i < n:
            out.append(re.escape(glob[i]))
            i += 1
        elif c == "*":
            out.append(".*")
        elif c == "?":
            out.append(".")
        elif c == "[":
            parsed = _translate_class(glob, i)
            if parsed is None:
                out.append(re.escape(c))
            else:
                cls, i = parsed
                out.append(cls)
        else:
            out.append(re.escape(c))
    return "(?s:" + "".join(out) + r")\Z"


def _translate_class(glob: str, start: int) -> tuple[str, int] | None:
    """Translate a `[...]` class whose body starts at `start`; `None` if unterminated."""
    i, n = start, len(glob)
    negate = i < n and glob[i] in "!^"
    if negate:
        i += 1
    chars: list[str] = []
    first = True
    while i < n:
        c = glob[i]
        if c == "]" and not first:
            body = "".join(chars)
            return ("[^" if negate else "[") + body + "]", i + 1
        first = False
        if c == "\\" and i + 1 < n:
            chars.append(re.escape(glob[i + 1]))
            i += 2
        elif c == "-" and chars and i + 1 < n and glob[i + 1] != "]":
            chars.append("-")
            i += 1
        else:
            chars.append(re.escape(c))
            i += 1
    return None


@cache
def _segment_regex(glob: str) -> re.Pattern[str]:
    return re.compile(_translate(glob))


def glob_matches(glob: str, segment: str) -> bool:
    """Case-sensitive `*`, `?`, `[...]` and `\\` escape match of a single path segment."""
    return _segment_regex(glob).match(segment) is not None


def match_segments(pattern: Sequence[str], path: Sequence[str]) -> bool:
    """
    Match pattern segments against path segments, where `**` stands for zero
    or more whole segments and every other segment must glob-match exactly one
    path segment.

    Evaluated as a table over (pattern position, path position), filled from
    the end, so the cost is at most `len(pattern) * len(path)` glob checks
    however many `**` segments the pattern holds.
    """
    pat_len, path_len = len(pattern), len(path)
    # below[j] holds the result for pattern position i + 1, path position j.
    below = [j == path_len for j in range(path_len + 1)]
    for i in range(pat_len - 1, -1, -1):
        seg = pattern[i]
        row = [False] * (path_len + 1)
        # Path exhausted: only a final `**` may remain.
        row[path_len] = seg == DOUBLE_STAR and i == pat_len - 1
        for j in range(path_len - 1, -1, -1):
            if seg == DOUBLE_STAR:
                row[j] = below[j] or row[j + 1]
            else:
                row[j] = below[j + 1] and glob_matches(seg, path[j])
        below = row
    return below[0]


def pattern_matches(pattern: Pattern, path: Sequence[str]) -> bool:
    """
    Check a compiled pattern against a path relative to the rule set's directory.

    A base-name pattern (such as `*.log`) also matches on the last segment
    alone, at any depth. The directory-only flag is not applied here.
    """
    if not path:
        return False
    if pattern.basename_only and glob_matches(pattern.segments[0], path[-1]):
        return True
    return match_segments(pattern.segments, path)
