"""
Single-threaded directory walk that selects the entries to pack.

Exclusion is decided per entry in tiers, and an excluded directory is pruned
so nothing below it is visited:

1. the running tool itself and the output file
2. rule files, nearest directory first (`.gitignore` by default)
3. the built-in default rules
4. hidden entries (names starting with `.`)
5. the run's custom exclude patterns

Tiers 3 and 4 only apply when no rule file decided the entry.
"""

from __future__ import annotations

import logging
import os
import threading
from pathlib import Path

import pathspec

from promptpacker.errors import PackCancelled, TraversalAccessError
from promptpacker.ignore.defaults import DefaultRuleTable
from promptpacker.ignore.resolver import HierarchicalResolver
from promptpacker.ignore.rules import RuleSetCache
from promptpacker.pipeline.types import PackOptions, WalkEntry

logger = logging.getLogger(__name__)


def _anchor_pattern(pattern: str) -> str:
    """Anchor a custom exclude at the root, so `*.txt` only matches root-level files."""
    negated = pattern.startswith("!")
    body = pattern[1:] if negated else pattern
    return ("!" if negated else "") + "/" + body.lstrip("/")


class WalkPipeline:
    """
    Walks `options.root` once and returns the selected entries. Directory
    decisions depend on their ancestors, so the walk is never parallelized.
    """

    def __init__(
        self,
        options: PackOptions,
        resolver: HierarchicalResolver | None = None,
        defaults: DefaultRuleTable | None = None,
        cancel: threading.Event | None = None,
    ) -> None:
        self.options: PackOptions = options
        self.resolver: HierarchicalResolver = resolver or HierarchicalResolver(
            options.root, RuleSetCache(options.ignore_filename)
        )
        self.defaults: DefaultRuleTable = defaults or DefaultRuleTable()
        self.access_errors: list[TraversalAccessError] = []
        self._exclude_spec: pathspec.PathSpec = pathspec.PathSpec.from_lines(
            "gitignore", [_anchor_pattern(p) for p in options.exclude if p.strip()]
        )
        self._cancel = cancel
        self._root_is_hidden = options.root.name.startswith(".")

    def walk(self) -> list[WalkEntry]:
        """
        Walk the tree with `os.walk()`, pruning excluded directories in place.
        Entries within a directory are visited in name order.
        """
        root = self.options.root
        entries: list[WalkEntry] = []

        for dirpath, dirnames, filenames in os.walk(root, onerror=self._on_walk_error):
            current = Path(dirpath)
            rel_dir = current.relative_to(root).as_posix()
            prefix = "" if rel_dir == "." else rel_dir + "/"

            kept_dirs: list[str] = []
            for name in sorted(dirnames):
                self._check_cancelled()
                entry = self._visit(current / name, prefix + name, is_dir=True)
                if entry is not None:
                    entries.append(entry)
                    kept_dirs.append(name)
            # Prune excluded directories in place (prevents descent)
            dirnames[:] = kept_dirs

            for name in sorted(filenames):
                self._check_cancelled()
                entry = self._visit(current / name, prefix + name, is_dir=False)
                if entry is not None:
                    entries.append(entry)

        logger.debug("Walk selected %d entries under %s", len(entries), root)
        return entries

    def _visit(self, abs_path: Path, rel_path: str, is_dir: bool) -> WalkEntry | None:
        if self.is_excluded(abs_path, rel_path, is_dir):
            return None
        return WalkEntry(
            rel_path=rel_path,
            abs_path=abs_path,
            is_dir=is_dir,
            depth=rel_path.count("/"),
        )

    def is_excluded(self, abs_path: Path, rel_path: str, is_dir: bool) -> bool:
        """Run an entry through every exclusion tier."""
        if self._is_self(abs_path):
            return True

        decided = False
        if self.options.respect_gitignore:
            decision = self.resolver.resolve(abs_path, is_dir)
            if decision.decisive:
                if decision.excluded:
                    logger.debug("Excluded by ignore rules: %s", rel_path)
                    return True
                decided = True

        if not decided and self.options.use_default_excludes:
            decision = self.defaults.decide(rel_path, is_dir)
            if decision.decisive:
                if decision.excluded:
                    logger.debug("Excluded by default rules: %s", rel_path)
                    return True
                decided = True

        if not decided and self._is_hidden(abs_path):
            logger.debug("Excluded hidden entry: %s", rel_path)
            return True

        if self._exclude_spec.match_file(rel_path) or (
            is_dir and self._exclude_spec.match_file(rel_path + "/")
        ):
            logger.debug("Excluded by custom pattern: %s", rel_path)
            return True

        return False

    def _is_self(self, abs_path: Path) -> bool:
        executable = self.options.executable_path
        if executable is not None and abs_path == executable:
            return True
        return abs_path == self.options.output

    def _is_hidden(self, abs_path: Path) -> bool:
        if not abs_path.name.startswith("."):
            return False
        return not (self._root_is_hidden and abs_path == self.options.root)

    def _on_walk_error(self, error: OSError) -> None:
        access_error = TraversalAccessError(f"Error accessing path {error.filename!r}: {error}")
        self.access_errors.append(access_error)
        logger.warning("%s", access_error)

    def _check_cancelled(self) -> None:
        if self._cancel is not None and self._cancel.is_set():
            raise PackCancelled("Walk cancelled")
