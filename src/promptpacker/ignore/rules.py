"""Per-directory rule sets and the run-scoped cache that loads them."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from promptpacker.errors import RuleFileReadError
from promptpacker.ignore.patterns import Pattern, compile_patterns

logger = logging.getLogger(__name__)

DEFAULT_RULE_FILENAME = ".gitignore"

RuleReader = Callable[[Path], list[str] | None]


@dataclass(frozen=True)
class RuleSet:
    """Compiled patterns of one rule file, in declaration order."""

    directory: Path
    patterns: tuple[Pattern, ...] = ()


def read_rule_file(path: Path) -> list[str] | None:
    """
    Read a rule file as UTF-8 lines. Returns `None` if there is no such file.
    Raises `RuleFileReadError` if the file exists but cannot be read.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except (FileNotFoundError, NotADirectoryError):
        return None
    except (OSError, UnicodeDecodeError) as e:
        raise RuleFileReadError(f"Error reading {path}: {e}") from e
    return text.splitlines()


class RuleSetCache:
    """
    Loads each directory's rule file at most once per run and memoizes the
    compiled `RuleSet`, including the "no rule file here" outcome.

    Safe to share between threads. Storage is read outside the lock; the first
    load to finish is the one kept, so a directory never has two rule sets.
    """

    def __init__(
        self,
        filename: str = DEFAULT_RULE_FILENAME,
        reader: RuleReader | None = None,
    ) -> None:
        self.filename: str = filename
        self._reader: RuleReader = reader or read_rule_file
        self._lock = threading.Lock()
        # directory -> (rule set, found)
        self._entries: dict[Path, tuple[RuleSet, bool]] = {}

    def load(self, directory: Path) -> tuple[RuleSet, bool]:
        """
        Return the rule set for `directory` and whether a rule file was found.
        A directory without a usable rule file yields an empty rule set and `False`.
        """
        with self._lock:
            cached = self._entries.get(directory)
        if cached is not None:
            return cached

        loaded = self._read(directory)
        with self._lock:
            return self._entries.setdefault(directory, loaded)

    def _read(self, directory: Path) -> tuple[RuleSet, bool]:
        rule_path = directory / self.filename
        try:
            lines = self._reader(rule_path)
        except RuleFileReadError as e:
            logger.warning("%s", e)
            return RuleSet(directory), False
        if lines is None:
            return RuleSet(directory), False
        rule_set = RuleSet(directory, compile_patterns(lines))
        logger.debug("Loaded %d rules from %s", len(rule_set.patterns), rule_path)
        return rule_set, True

    def __contains__(self, directory: object) -> bool:
        with self._lock:
            return directory in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
