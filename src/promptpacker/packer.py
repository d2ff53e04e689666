"""
Top-level packing run: walk the tree, read selected files in parallel, and
write the Markdown report.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from pathlib import Path

from promptpacker.ignore.defaults import DefaultRuleTable
from promptpacker.ignore.resolver import HierarchicalResolver
from promptpacker.ignore.rules import RuleSetCache
from promptpacker.pipeline.types import PackOptions, WalkEntry
from promptpacker.pipeline.walker import WalkPipeline
from promptpacker.pipeline.workers import WorkerPool
from promptpacker.report import sort_entries, write_report

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PackResult:
    """Summary of a completed run."""

    output: Path
    entry_count: int
    file_count: int
    content_errors: int

    @property
    def ok(self) -> bool:
        return self.content_errors == 0


def select_entries(options: PackOptions, cancel: threading.Event | None = None) -> list[WalkEntry]:
    """Walk `options.root` and return the selected entries in report order."""
    if not options.root.is_dir():
        raise NotADirectoryError(f"Root is not a directory: {options.root}")
    cache = RuleSetCache(options.ignore_filename)
    walker = WalkPipeline(
        options,
        resolver=HierarchicalResolver(options.root, cache),
        defaults=DefaultRuleTable(),
        cancel=cancel,
    )
    return sort_entries(walker.walk())


def pack_directory(options: PackOptions, cancel: threading.Event | None = None) -> PackResult:
    """
    Pack `options.root` into the Markdown file at `options.output`.

    Unreadable files are reported inline and counted in `content_errors`.
    Raises `OutputWriteError` if the report cannot be written, and
    `PackCancelled` if `cancel` is set before the report is written.
    """
    logger.info("Scanning directory: %s", options.root)
    logger.info("Outputting to: %s", options.output)
    logger.info("Using %d workers for content processing", options.workers)
    if options.exclude:
        logger.info("Excluding patterns (custom): %s", ", ".join(options.exclude))

    logger.info("Phase 1: Walking directory structure...")
    entries = select_entries(options, cancel)
    file_count = sum(1 for entry in entries if not entry.is_dir)
    logger.info("Phase 1: Found %d entries (%d files)", len(entries), file_count)

    logger.info("Phase 2: Processing file contents...")
    collector = WorkerPool(options.workers, cancel=cancel).run(entries)

    logger.info("Phase 3: Writing report...")
    missing = write_report(options.output, entries, collector)

    content_errors = collector.error_count + missing
    if content_errors:
        logger.warning("Completed with %d file content errors", content_errors)
    return PackResult(
        output=options.output,
        entry_count=len(entries),
        file_count=file_count,
        content_errors=content_errors,
    )
