"""Tests for hierarchical ignore resolution and the built-in rule table."""

from __future__ import annotations

from pathlib import Path

from promptpacker.ignore import (
    EXCLUDE,
    INCLUDE,
    UNDECIDED,
    DefaultRuleTable,
    HierarchicalResolver,
    RuleSetCache,
    compile_patterns,
    evaluate_rules,
)


def _resolver(root: Path) -> HierarchicalResolver:
    return HierarchicalResolver(root, RuleSetCache())


def test_evaluate_rules_last_match_wins():
    patterns = compile_patterns(["*.log", "!keep.log"])
    assert evaluate_rules(patterns, ["keep.log"], False) == INCLUDE
    assert evaluate_rules(patterns, ["other.log"], False) == EXCLUDE
    assert evaluate_rules(patterns, ["notes.txt"], False) == UNDECIDED

    reversed_patterns = compile_patterns(["!keep.log", "*.log"])
    assert evaluate_rules(reversed_patterns, ["keep.log"], False) == EXCLUDE


def test_directory_only_pattern_never_excludes_file():
    patterns = compile_patterns(["build/"])
    assert evaluate_rules(patterns, ["build"], True) == EXCLUDE
    assert evaluate_rules(patterns, ["build"], False) == UNDECIDED


def test_directory_rule_in_root(tmp_path: Path):
    (tmp_path / ".gitignore").write_text("build/\n")
    (tmp_path / "build").mkdir()
    decision = _resolver(tmp_path).resolve(tmp_path / "build", is_dir=True)
    assert decision.excluded
    assert decision.decisive


def test_anchored_rule_only_matches_at_rule_directory(tmp_path: Path):
    (tmp_path / ".gitignore").write_text("/build\n")
    resolver = _resolver(tmp_path)
    assert resolver.resolve(tmp_path / "build", is_dir=True) == EXCLUDE
    assert resolver.resolve(tmp_path / "a" / "build", is_dir=True) == UNDECIDED


def test_unanchored_rule_matches_at_any_depth(tmp_path: Path):
    (tmp_path / ".gitignore").write_text("build\n")
    resolver = _resolver(tmp_path)
    assert resolver.resolve(tmp_path / "build", is_dir=True) == EXCLUDE
    assert resolver.resolve(tmp_path / "a" / "b" / "build", is_dir=True) == EXCLUDE


def test_nearest_rule_file_overrides_ancestor(tmp_path: Path):
    (tmp_path / ".gitignore").write_text("*.log\n")
    logs = tmp_path / "logs"
    logs.mkdir()
    (logs / ".gitignore").write_text("!important.log\n")
    resolver = _resolver(tmp_path)

    assert resolver.resolve(logs / "important.log", is_dir=False) == INCLUDE
    # No rule in logs/ matches, so the root decides.
    assert resolver.resolve(logs / "debug.log", is_dir=False) == EXCLUDE


def test_nearest_rule_file_wins_even_when_excluding(tmp_path: Path):
    (tmp_path / ".gitignore").write_text("!*.txt\n")
    sub = tmp_path / "sub"
    sub.mkdir()
    (sub / ".gitignore").write_text("*.txt\n")
    assert _resolver(tmp_path).resolve(sub / "notes.txt", is_dir=False) == EXCLUDE


def test_rules_are_relative_to_their_directory(tmp_path: Path):
    sub = tmp_path / "sub"
    sub.mkdir()
    (sub / ".gitignore").write_text("/generated\ndocs/*.md\n")
    resolver = _resolver(tmp_path)
    assert resolver.resolve(sub / "generated", is_dir=True) == EXCLUDE
    assert resolver.resolve(tmp_path / "generated", is_dir=True) == UNDECIDED
    assert resolver.resolve(sub / "docs" / "a.md", is_dir=False) == EXCLUDE


def test_directory_own_rule_file_does_not_match_itself(tmp_path: Path):
    sub = tmp_path / "sub"
    sub.mkdir()
    (sub / ".gitignore").write_text("**\n")
    resolver = _resolver(tmp_path)
    assert resolver.resolve(sub, is_dir=True) == UNDECIDED
    assert resolver.resolve(sub / "file.py", is_dir=False) == EXCLUDE


def test_rule_files_above_root_are_ignored(tmp_path: Path):
    (tmp_path / ".gitignore").write_text("*.py\n")
    root = tmp_path / "project"
    root.mkdir()
    assert _resolver(root).resolve(root / "main.py", is_dir=False) == UNDECIDED


def test_no_rule_files_is_not_decisive(tmp_path: Path):
    assert _resolver(tmp_path).resolve(tmp_path / "a" / "b.txt", is_dir=False) == UNDECIDED


def test_resolution_is_idempotent(tmp_path: Path):
    (tmp_path / ".gitignore").write_text("*.log\n!keep.log\n")
    resolver = _resolver(tmp_path)
    paths = [tmp_path / "a.log", tmp_path / "keep.log", tmp_path / "a.txt"]
    first = [resolver.resolve(p, is_dir=False) for p in paths]
    second = [_resolver(tmp_path).resolve(p, is_dir=False) for p in paths]
    assert first == second == [EXCLUDE, INCLUDE, UNDECIDED]


def test_default_table_excludes_env_file():
    defaults = DefaultRuleTable()
    assert defaults.decide(".env", is_dir=False) == EXCLUDE
    assert defaults.decide("config/.env.local", is_dir=False) == EXCLUDE


def test_default_table_reincludes_env_example():
    defaults = DefaultRuleTable()
    assert defaults.decide(".env.example", is_dir=False) == INCLUDE
    assert defaults.decide(".env.sample", is_dir=False) == INCLUDE


def test_default_table_directory_patterns():
    defaults = DefaultRuleTable()
    assert defaults.decide("node_modules", is_dir=True) == EXCLUDE
    assert defaults.decide("packages/web/node_modules", is_dir=True) == EXCLUDE
    assert defaults.decide("Bin", is_dir=True) == EXCLUDE
    # A file named like a directory pattern is not excluded.
    assert defaults.decide("build", is_dir=False) == UNDECIDED


def test_default_table_file_patterns():
    defaults = DefaultRuleTable()
    assert defaults.decide("src/module.pyc", is_dir=False) == EXCLUDE
    assert defaults.decide("notes.bak", is_dir=False) == EXCLUDE
    assert defaults.decide("src/main.py", is_dir=False) == UNDECIDED


def test_default_table_custom_lines():
    defaults = DefaultRuleTable(["*.gen", "!keep.gen"])
    assert defaults.decide("a/b.gen", is_dir=False) == EXCLUDE
    assert defaults.decide("keep.gen", is_dir=False) == INCLUDE
    assert defaults.decide("node_modules", is_dir=True) == UNDECIDED
