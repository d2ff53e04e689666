"""
Built-in ignore rules, applied when no rule file decides an entry.

These patterns use gitignore syntax. Directory patterns end with `/`.
"""

from __future__ import annotations

from collections.abc import Iterable

from promptpacker.ignore.patterns import compile_patterns
from promptpacker.ignore.resolver import Decision, evaluate_rules

DEFAULT_IGNORE_PATTERNS: list[str] = [
    # Temp, backup and log files
    "*.log",
    "*.tmp",
    "*.temp",
    "*.cache",
    "*.bak",
    "*.swp",
    "*.swo",
    "*~",
    "._*",
    "npm-debug.log*",
    "yarn-error.log*",
    "hs_err_pid*",
    # IDE/Editor
    ".idea/",
    ".vscode/",
    "*.sublime-project",
    "*.sublime-workspace",
    ".project",
    ".classpath",
    ".settings/",
    "*.komodoproject",
    ".komodocfg/",
    # Dependencies
    "node_modules/",
    "bower_components/",
    "vendor/",
    # Build output
    "dist/",
    "build/",
    "out/",
    "target/",
    "coverage/",
    ".gradle/",
    "[Bb]in/",
    "[Oo]bj/",
    # Python
    "__pycache__/",
    "*.py[cod]",
    "*$py.class",
    ".pytest_cache/",
    "*.egg-info/",
    "*.egg",
    # Compiled artifacts
    "*.class",
    "*.jar",
    "*.war",
    "*.ear",
    "*.gem",
    ".bundle/",
    "*.exe",
    "*.dll",
    "*.so",
    "*.dylib",
    "*_test",
    # Framework output
    ".next/",
    ".nuxt/",
    "instance/",
    # Environment files (examples and samples stay)
    ".env",
    ".env.*",
    "!.env.example",
    "!.env.sample",
    ".envrc",
    # OS files
    ".DS_Store",
    "Thumbs.db",
    # Infrastructure state
    ".terraform/",
    "*.tfstate",
    "*.tfstate.backup",
    # Virtual environments
    "venv/",
    ".venv/",
    "env/",
    "ENV/",
    ".env/",
    ".direnv/",
    # Version control
    ".git/",
    ".svn/",
    ".hg/",
]


class DefaultRuleTable:
    """
    A fixed rule set without directory scoping, matched against the full
    root-relative path of an entry. The last matching pattern wins.
    """

    def __init__(self, lines: Iterable[str] = DEFAULT_IGNORE_PATTERNS) -> None:
        self.patterns = compile_patterns(lines)

    def decide(self, rel_path: str, is_dir: bool) -> Decision:
        return evaluate_rules(self.patterns, [p for p in rel_path.split("/") if p], is_dir)
