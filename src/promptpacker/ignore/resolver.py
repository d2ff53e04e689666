"""
Hierarchical ignore resolution: the nearest directory with a decisive rule wins.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from promptpacker.ignore.matching import pattern_matches
from promptpacker.ignore.patterns import Pattern
from promptpacker.ignore.rules import RuleSetCache


@dataclass(frozen=True)
class Decision:
    """
    Outcome of one resolution tier. `decisive=False` means no rule fired and
    the next tier should be consulted.
    """

    excluded: bool = False
    decisive: bool = False


UNDECIDED = Decision()
EXCLUDE = Decision(excluded=True, decisive=True)
INCLUDE = Decision(excluded=False, decisive=True)


def evaluate_rules(patterns: Sequence[Pattern], path: Sequence[str], is_dir: bool) -> Decision:
    """
    Evaluate one rule set against a path relative to its directory.
    The last matching pattern wins.
    """
    decision = UNDECIDED
    for pattern in patterns:
        if pattern.directory_only and not is_dir:
            continue
        if pattern_matches(pattern, path):
            decision = INCLUDE if pattern.negated else EXCLUDE
    return decision


def _is_within(path: Path, root: Path) -> bool:
    return path == root or root in path.parents


def resolve_hierarchical(
    abs_path: Path, is_dir: bool, root: Path, cache: RuleSetCache
) -> Decision:
    """
    Walk from the entry's directory (the entry itself for directories) up to
    `root`, returning the verdict of the first rule set that decides.
    """
    current = abs_path if is_dir else abs_path.parent
    while _is_within(current, root):
        rule_set, found = cache.load(current)
        if found and rule_set.patterns:
            rel_parts = abs_path.relative_to(current).parts
            decision = evaluate_rules(rule_set.patterns, rel_parts, is_dir)
            if decision.decisive:
                return decision
        if current == root:
            break
        current = current.parent
    return UNDECIDED


class HierarchicalResolver:
    """Resolves entries under one root against per-directory rule files."""

    def __init__(self, root: Path, cache: RuleSetCache | None = None) -> None:
        self.root: Path = root
        self.cache: RuleSetCache = cache if cache is not None else RuleSetCache()

    def resolve(self, abs_path: Path, is_dir: bool) -> Decision:
        return resolve_hierarchical(abs_path, is_dir, self.root, self.cache)
