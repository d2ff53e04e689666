"""
TOML-based config file loading for PromptPacker.

Searches for `.promptpacker.toml`, `promptpacker.toml`, or `pyproject.toml
[tool.promptpacker]` walking up from the current directory. Config values are
merged with CLI flags using three-way precedence: explicit CLI flags > config
file > built-in defaults.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, TypeVar, cast

if sys.version_info >= (3, 11):
    import tomllib  # pyright: ignore[reportUnreachable]
else:
    import tomli as tomllib  # type: ignore[no-redef]  # pyright: ignore[reportUnreachable]

logger = logging.getLogger(__name__)


@dataclass
class PackerConfig:
    """
    Parsed config from a TOML file. Fields are `None` when not set in the config,
    allowing the merge logic to distinguish "not configured" from "explicitly set
    to default value".
    """

    root: str | None = None
    output: str | None = None
    exclude: list[str] | None = None
    workers: int | None = None
    respect_gitignore: bool | None = None
    default_excludes: bool | None = None
    ignore_file: str | None = None


# Config file search order (first match wins within each directory level)
_CONFIG_FILENAMES = [".promptpacker.toml", "promptpacker.toml", "pyproject.toml"]

_VALID_FIELDS = {f.name for f in fields(PackerConfig)}
_BOOL_FIELDS = {"respect_gitignore", "default_excludes"}


def find_config_file(start_dir: Path) -> Path | None:
    """
    Walk up from `start_dir` looking for a config file. Returns the first
    found, or `None`. Search order per directory: `.promptpacker.toml` >
    `promptpacker.toml` > `pyproject.toml` (only if it has `[tool.promptpacker]`).
    """
    current = start_dir.resolve()
    while True:
        for filename in _CONFIG_FILENAMES:
            candidate = current / filename
            if candidate.is_file():
                if filename == "pyproject.toml":
                    if _pyproject_has_section(candidate):
                        return candidate
                else:
                    return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


def _pyproject_has_section(path: Path) -> bool:
    """Check if a pyproject.toml has a [tool.promptpacker] section."""
    try:
        data = tomllib.loads(path.read_text())
        return "promptpacker" in data.get("tool", {})
    except (tomllib.TOMLDecodeError, OSError):
        return False


def load_config(config_path: Path) -> PackerConfig:
    """
    Load a `PackerConfig` from a TOML file. Relative `root` and `output` values
    are taken relative to the config file's directory. A file that is not
    valid TOML is reported and treated as empty.
    """
    try:
        data = tomllib.loads(config_path.read_text())
    except tomllib.TOMLDecodeError as e:
        logger.warning("Ignoring invalid config file %s: %s", config_path, e)
        return PackerConfig()

    if config_path.name == "pyproject.toml":
        data = data.get("tool", {}).get("promptpacker", {})

    config = _parse_config_data(data)
    base = config_path.resolve().parent
    if config.root is not None:
        config.root = str(base / config.root)
    if config.output is not None:
        config.output = str(base / config.output)
    return config


def _parse_config_data(data: dict[str, Any]) -> PackerConfig:
    """Parse a flat or sectioned TOML dict into PackerConfig, mapping kebab-case keys."""
    # Tables such as [walk] or [output] merge into the top level
    flat: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, dict):
            for sub_key, sub_value in cast(dict[str, Any], value).items():
                flat[sub_key] = sub_value
        else:
            flat[key] = value

    mapped: dict[str, Any] = {}
    for key, value in flat.items():
        snake_key = key.replace("-", "_")
        if snake_key not in _VALID_FIELDS:
            logger.warning("Ignoring unrecognized config key: %s", key)
            continue
        if snake_key == "exclude" and isinstance(value, str):
            value = [value]
        if not _has_valid_type(snake_key, value):
            logger.warning("Ignoring config key %s: invalid value %r", key, value)
            continue
        mapped[snake_key] = value
    return PackerConfig(**mapped)


def _has_valid_type(name: str, value: Any) -> bool:
    if name in _BOOL_FIELDS:
        return isinstance(value, bool)
    if name == "workers":
        # Booleans are ints too.
        return isinstance(value, int) and not isinstance(value, bool)
    if name == "exclude":
        return isinstance(value, list) and all(
            isinstance(item, str) for item in cast(list[Any], value)
        )
    return isinstance(value, str)


_T = TypeVar("_T")


def merge_cli_with_config(
    cli_opts: _T,
    config: PackerConfig | None,
    explicit_flags: set[str],
) -> _T:
    """
    Merge CLI options with config file settings.

    Precedence: explicit CLI flags > config file > built-in defaults.
    """
    if config is None:
        return cli_opts

    for cfg_field in fields(PackerConfig):
        cfg_value = getattr(config, cfg_field.name)
        if cfg_value is None:
            continue  # Not set in config

        # Skip if CLI explicitly set this flag
        if cfg_field.name in explicit_flags:
            continue

        if hasattr(cli_opts, cfg_field.name):
            setattr(cli_opts, cfg_field.name, cfg_value)

    return cli_opts
