"""
Concurrent content stage: a fixed pool of threads reads and formats every
selected file, and a collector gathers the results by relative path.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterator, Sequence
from queue import Queue

from promptpacker.errors import ContentReadError, PackCancelled
from promptpacker.languages import language_hint
from promptpacker.pipeline.types import FileResult, FileTask, WalkEntry
from promptpacker.report import format_file_section

logger = logging.getLogger(__name__)

# Queue slots per worker, bounding buffered tasks and results.
_QUEUE_SLOTS_PER_WORKER = 2


def process_file(entry: WalkEntry) -> FileResult:
    """
    Read one file and format it as a report section. A failed read still
    yields a section, with the error message in place of the content.
    """
    language = language_hint(entry.name)
    try:
        body = entry.abs_path.read_bytes().decode("utf-8", errors="replace")
    except OSError as e:
        error = ContentReadError(f"Error reading file: {e}")
        return FileResult(
            rel_path=entry.rel_path,
            content=format_file_section(entry.rel_path, f"{error}\n", language),
            error=error,
        )
    return FileResult(
        rel_path=entry.rel_path,
        content=format_file_section(entry.rel_path, body, language),
    )


class ResultCollector:
    """Results keyed by relative path, re-associated with entries on output."""

    def __init__(self) -> None:
        self._results: dict[str, FileResult] = {}

    def add(self, result: FileResult) -> None:
        self._results[result.rel_path] = result

    def get(self, rel_path: str) -> FileResult | None:
        return self._results.get(rel_path)

    def __len__(self) -> int:
        return len(self._results)

    @property
    def error_count(self) -> int:
        return sum(1 for result in self._results.values() if result.error is not None)

    def ordered(
        self, entries: Sequence[WalkEntry]
    ) -> Iterator[tuple[WalkEntry, FileResult | None]]:
        """Yield each file entry with its result (or `None`), in the order given."""
        for entry in entries:
            if not entry.is_dir:
                yield entry, self._results.get(entry.rel_path)


class WorkerPool:
    """
    Processes file entries on `workers` threads. Tasks and results pass through
    bounded queues, so memory for in-flight work scales with the worker count.
    Each submitted task produces exactly one result.
    """

    def __init__(
        self,
        workers: int,
        process: Callable[[WalkEntry], FileResult] = process_file,
        cancel: threading.Event | None = None,
    ) -> None:
        self.workers: int = max(1, workers)
        self._process = process
        self._cancel = cancel if cancel is not None else threading.Event()

    def run(self, entries: Sequence[WalkEntry]) -> ResultCollector:
        """
        Process every file entry and return the filled collector. Returns only
        after all workers and the collector have finished.
        """
        slots = self.workers * _QUEUE_SLOTS_PER_WORKER
        tasks: Queue[FileTask | None] = Queue(maxsize=slots)
        results: Queue[FileResult | None] = Queue(maxsize=slots)
        collector = ResultCollector()

        collect_thread = threading.Thread(
            target=self._collect, args=(results, collector), name="promptpacker-collector"
        )
        collect_thread.start()
        threads = [
            threading.Thread(
                target=self._work, args=(tasks, results), name=f"promptpacker-worker-{i}"
            )
            for i in range(self.workers)
        ]
        for thread in threads:
            thread.start()
        logger.debug("Started %d workers", len(threads))

        submitted = 0
        try:
            for entry in entries:
                if self._cancel.is_set():
                    break
                if not entry.is_dir:
                    tasks.put(FileTask(entry))
                    submitted += 1
        finally:
            for _ in threads:
                tasks.put(None)
            for thread in threads:
                thread.join()
            results.put(None)
            collect_thread.join()

        if self._cancel.is_set():
            raise PackCancelled("Content processing cancelled")
        logger.info("Processed %d file tasks on %d workers", submitted, self.workers)
        return collector

    def _work(self, tasks: Queue[FileTask | None], results: Queue[FileResult | None]) -> None:
        while True:
            task = tasks.get()
            if task is None:
                return
            if self._cancel.is_set():
                # Drain without processing so the submitter never blocks.
                continue
            try:
                result = self._process(task.entry)
            except Exception as e:
                logger.exception("Unexpected error processing %s", task.entry.rel_path)
                error = ContentReadError(f"Error processing file: {e}")
                result = FileResult(
                    rel_path=task.entry.rel_path,
                    content=format_file_section(task.entry.rel_path, f"{error}\n"),
                    error=error,
                )
            results.put(result)

    @staticmethod
    def _collect(results: Queue[FileResult | None], collector: ResultCollector) -> None:
        while True:
            result = results.get()
            if result is None:
                return
            collector.add(result)
