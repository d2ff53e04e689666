"""Code fence language hints by file extension."""

from __future__ import annotations

# Extensions longer than this are not used as a fallback hint.
_MAX_FALLBACK_LEN = 20

_LANGUAGE_BY_EXT: dict[str, str] = {
    ".go": "go",
    ".js": "javascript",
    ".ts": "typescript",
    ".py": "python",
    ".java": "java",
    ".cs": "csharp",
    ".php": "php",
    ".rb": "ruby",
    ".rs": "rust",
    ".swift": "swift",
    ".kt": "kotlin",
    ".kts": "kotlin",
    ".scala": "scala",
    ".html": "html",
    ".htm": "html",
    ".css": "css",
    ".scss": "scss",
    ".sass": "scss",
    ".less": "less",
    ".json": "json",
    ".yaml": "yaml",
    ".yml": "yaml",
    ".xml": "xml",
    ".sql": "sql",
    ".sh": "bash",
    ".bash": "bash",
    ".zsh": "bash",
    ".ps1": "powershell",
    ".md": "markdown",
    ".markdown": "markdown",
    ".txt": "",
    "": "",
    ".dockerfile": "dockerfile",
    ".docker": "dockerfile",
    ".env": "bash",
    ".gitignore": "gitignore",
    ".mod": "go.mod",
    ".sum": "go.sum",
    ".toml": "toml",
    ".lua": "lua",
    ".perl": "perl",
    ".pl": "perl",
    ".r": "r",
    ".dart": "dart",
    ".jsx": "jsx",
    ".tsx": "tsx",
    ".vue": "vue",
    ".svelte": "svelte",
}


def language_hint(filename: str) -> str:
    """
    Return the fence language for a file name, e.g. `python` for `app.py`.
    Unknown extensions are used as-is (without the dot) unless unreasonably long.
    """
    # Dotfiles such as `.gitignore` count as all extension.
    dot = filename.rfind(".")
    ext = filename[dot:].lower() if dot != -1 else ""
    if ext in _LANGUAGE_BY_EXT:
        return _LANGUAGE_BY_EXT[ext]
    fallback = ext.removeprefix(".")
    return fallback if len(fallback) <= _MAX_FALLBACK_LEN else ""
