"""
Walk and content pipeline: a single-threaded walk selects entries, then a
worker pool reads and formats the selected files in parallel.

Usage::

    from promptpacker.pipeline import PackOptions, WalkPipeline, WorkerPool

    options = PackOptions(root=Path("."), exclude=["*.bak"])
    entries = WalkPipeline(options).walk()
    collector = WorkerPool(options.workers).run(entries)
"""

from promptpacker.pipeline.types import (
    DEFAULT_OUTPUT,
    FileResult,
    FileTask,
    PackOptions,
    WalkEntry,
    default_workers,
)
from promptpacker.pipeline.walker import WalkPipeline
from promptpacker.pipeline.workers import ResultCollector, WorkerPool, process_file

__all__ = [
    "DEFAULT_OUTPUT",
    "FileResult",
    "FileTask",
    "PackOptions",
    "ResultCollector",
    "WalkEntry",
    "WalkPipeline",
    "WorkerPool",
    "default_workers",
    "process_file",
]
