"""
Compilation of gitignore-style rule lines into structured patterns.

Supported syntax: `*`, `?`, `[...]`, `**` segments, a leading `/` (anchor),
a trailing `/` (directories only) and a leading `!` (negation).
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

DOUBLE_STAR = "**"


@dataclass(frozen=True)
class Pattern:
    """
    One compiled rule line.

    `anchored` patterns only match from the directory that owns the rule set.
    `basename_only` is set for unanchored single-segment rules with no `/`
    in their body, which match a base name at any depth.
    """

    raw: str
    segments: tuple[str, ...]
    anchored: bool = False
    directory_only: bool = False
    negated: bool = False
    basename_only: bool = False


def compile_pattern(line: str) -> Pattern | None:
    """
    Compile a single rule line. Returns `None` for blank lines, comments and
    lines that reduce to nothing once the directives are stripped.
    """
    raw = line.strip()
    if not raw:
        return None

    body = raw
    negated = False
    if body.startswith("!"):
        negated = True
        body = body[1:]
        if not body:
            return None
    elif body.startswith("\\!"):
        body = body[1:]

    if body.startswith("\\#"):
        body = body[1:]
    elif body.startswith("#"):
        return None

    body = body.rstrip()
    directory_only = False
    if body.endswith("/"):
        directory_only = True
        body = body[:-1]

    anchored = False
    if body.startswith("/"):
        anchored = True
        body = body[1:]

    # Empty segments come from doubled or stray slashes; a bare `**` survives as one segment.
    segments = tuple(part for part in body.split("/") if part)
    if not segments:
        return None

    return Pattern(
        raw=raw,
        segments=segments,
        anchored=anchored,
        directory_only=directory_only,
        negated=negated,
        basename_only=not anchored and len(segments) == 1 and "/" not in body,
    )


def compile_patterns(lines: Iterable[str]) -> tuple[Pattern, ...]:
    """Compile rule lines in order, dropping blank, comment and invalid lines."""
    compiled: list[Pattern] = []
    for line in lines:
        pattern = compile_pattern(line)
        if pattern is not None:
            compiled.append(pattern)
    return tuple(compiled)
