"""
Markdown report: a project structure tree followed by one fenced section per file.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import TYPE_CHECKING, TextIO

from strif import atomic_output_file

from promptpacker.errors import OutputWriteError

if TYPE_CHECKING:
    from promptpacker.pipeline.types import WalkEntry
    from promptpacker.pipeline.workers import ResultCollector

logger = logging.getLogger(__name__)

_BACKTICK_RUN = re.compile(r"`{3,}")


def sort_entries(entries: Iterable[WalkEntry]) -> list[WalkEntry]:
    """
    Sort entries segment by segment, so every directory comes right before its
    contents. A shorter path sorts before a longer one sharing its prefix, and
    a directory before a file at the same path.
    """
    return sorted(entries, key=lambda e: (e.rel_path.split("/"), not e.is_dir, e.rel_path))


def render_structure(entries: Sequence[WalkEntry]) -> str:
    """Render the project tree, indenting each line with one `-` per level."""
    lines = ["# Project Structure", "", "```"]
    for entry in entries:
        indent = "-" * entry.depth + " " if entry.depth > 0 else ""
        marker = "/" if entry.is_dir else ""
        lines.append(f"{indent}{marker}{entry.name}")
    lines.append("```")
    return "\n".join(lines) + "\n\n"


def _fence_for(body: str) -> str:
    """A backtick fence longer than any backtick run inside `body`."""
    longest = max((len(run) for run in _BACKTICK_RUN.findall(body)), default=0)
    return "`" * max(3, longest + 1)


def format_file_section(rel_path: str, body: str, language: str = "") -> str:
    """Format one file as a `##` heading plus a fenced code block."""
    fence = _fence_for(body)
    return f"## {rel_path}\n\n{fence}{language}\n{body}\n{fence}\n\n"


def missing_section(rel_path: str) -> str:
    return format_file_section(rel_path, "Error: Processed content not found.")


def write_report(
    output: Path, entries: Sequence[WalkEntry], collector: ResultCollector
) -> int:
    """
    Write the full report atomically to `output`, with sections in the order of
    `entries`. Returns the number of file sections with missing content.

    Raises `OutputWriteError` if the file cannot be created or written.
    """
    try:
        with atomic_output_file(output, make_parents=True) as temp_path:
            with open(temp_path, "w", encoding="utf-8") as f:
                return _write_sections(f, entries, collector)
    except OSError as e:
        raise OutputWriteError(f"Error writing output file {str(output)!r}: {e}") from e


def _write_sections(f: TextIO, entries: Sequence[WalkEntry], collector: ResultCollector) -> int:
    f.write(render_structure(entries))
    f.write("# File Contents\n\n")
    missing = 0
    for entry, result in collector.ordered(entries):
        if result is None:
            logger.error("Result not found for file %s", entry.rel_path)
            f.write(missing_section(entry.rel_path))
            missing += 1
        else:
            f.write(result.content)
    return missing
