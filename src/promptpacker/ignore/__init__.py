"""
Gitignore-style rule resolution over a directory tree.

Rule files are compiled per directory, cached once per run, and resolved with
nearest-directory-wins precedence. A built-in rule table covers entries no
rule file decides.

Usage::

    from promptpacker.ignore import HierarchicalResolver, RuleSetCache

    resolver = HierarchicalResolver(root, RuleSetCache(".gitignore"))
    decision = resolver.resolve(root / "logs" / "app.log", is_dir=False)
"""

from promptpacker.ignore.defaults import DEFAULT_IGNORE_PATTERNS, DefaultRuleTable
from promptpacker.ignore.matching import match_segments, pattern_matches
from promptpacker.ignore.patterns import Pattern, compile_pattern, compile_patterns
from promptpacker.ignore.resolver import (
    EXCLUDE,
    INCLUDE,
    UNDECIDED,
    Decision,
    HierarchicalResolver,
    evaluate_rules,
    resolve_hierarchical,
)
from promptpacker.ignore.rules import DEFAULT_RULE_FILENAME, RuleSet, RuleSetCache

__all__ = [
    "DEFAULT_IGNORE_PATTERNS",
    "DEFAULT_RULE_FILENAME",
    "EXCLUDE",
    "INCLUDE",
    "UNDECIDED",
    "Decision",
    "DefaultRuleTable",
    "HierarchicalResolver",
    "Pattern",
    "RuleSet",
    "RuleSetCache",
    "compile_pattern",
    "compile_patterns",
    "evaluate_rules",
    "match_segments",
    "pattern_matches",
    "resolve_hierarchical",
]
