"""Configuration and record types for the walk and content pipeline."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from promptpacker.errors import ContentReadError
from promptpacker.ignore.rules import DEFAULT_RULE_FILENAME

DEFAULT_OUTPUT = "output.md"


def default_workers() -> int:
    """One worker per CPU, never fewer than one."""
    return max(1, os.cpu_count() or 1)


@dataclass
class PackOptions:
    """
    Settings for one packing run.

    `root` and `output` are made absolute on construction and `workers` is
    clamped to at least 1. `exclude` holds extra gitignore-style patterns
    matched against root-relative paths. `executable_path=None` skips
    self-exclusion of the running tool.
    """

    root: Path = field(default_factory=Path.cwd)
    output: Path = Path(DEFAULT_OUTPUT)
    exclude: list[str] = field(default_factory=list)
    workers: int = field(default_factory=default_workers)
    executable_path: Path | None = None
    respect_gitignore: bool = True
    use_default_excludes: bool = True
    ignore_filename: str = DEFAULT_RULE_FILENAME

    def __post_init__(self) -> None:
        self.root = Path(self.root).resolve()
        self.output = Path(self.output).resolve()
        if self.executable_path is not None:
            self.executable_path = Path(self.executable_path).resolve()
        self.workers = max(1, self.workers)


@dataclass(frozen=True)
class WalkEntry:
    """One selected filesystem entry. `rel_path` is root-relative and uses `/`."""

    rel_path: str
    abs_path: Path
    is_dir: bool
    depth: int

    @property
    def name(self) -> str:
        return self.rel_path.rsplit("/", 1)[-1]


@dataclass(frozen=True)
class FileTask:
    entry: WalkEntry


@dataclass(frozen=True)
class FileResult:
    """Formatted content of one file, or an error section if it could not be read."""

    rel_path: str
    content: str
    error: ContentReadError | None = None
