#!/usr/bin/env python3
"""
PromptPacker: Consolidate a code project into a single Markdown file, suitable for LLMs

Common usage:
  promptpacker
  promptpacker --root /path/to/project --output /path/to/project_summary.md
  promptpacker --exclude "*.log,build/*"
  promptpacker --workers 4
  promptpacker --list-files

Exclusion order:
  Entries are excluded by ignore files (.gitignore, nearest directory first), then
  built-in default ignores, then hidden entries (names starting with '.'), then
  --exclude patterns. Excluded directories are not descended into.
"""

from __future__ import annotations

import argparse
import importlib.metadata
import logging
import sys
from dataclasses import dataclass
from pathlib import Path

from promptpacker.config import find_config_file, load_config, merge_cli_with_config
from promptpacker.errors import OutputWriteError, PackCancelled
from promptpacker.ignore.rules import DEFAULT_RULE_FILENAME
from promptpacker.log_setup import configure_logging
from promptpacker.packer import pack_directory, select_entries
from promptpacker.pipeline.types import DEFAULT_OUTPUT, PackOptions, default_workers

logger = logging.getLogger(__name__)


@dataclass
class Options:
    """Command-line options for the promptpacker tool."""

    root: str
    output: str
    exclude: list[str]
    workers: int
    ignore_file: str
    respect_gitignore: bool
    default_excludes: bool
    list_files: bool
    verbose: bool
    quiet: bool
    version: bool


def _split_patterns(values: list[str] | None) -> list[str]:
    """Flatten repeated, comma-separated pattern arguments."""
    patterns: list[str] = []
    for value in values or []:
        patterns.extend(p.strip() for p in value.split(",") if p.strip())
    return patterns


def _parse_args(args: list[str] | None = None) -> tuple[Options, set[str]]:
    """
    Parse command-line arguments.

    Returns a tuple of (options, explicit_flags) where `explicit_flags` tracks
    which flags the user explicitly passed (for config merge precedence).
    """
    # Use the module's docstring as the description
    module_doc = __doc__ or ""
    doc_parts = module_doc.split("\n\n")
    description = doc_parts[0]
    epilog = "\n\n".join(doc_parts[1:])

    parser = argparse.ArgumentParser(
        prog="promptpacker",
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--root",
        type=str,
        default=".",
        metavar="DIR",
        help="Root directory of the project to scan (default: current directory)",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=str,
        default=DEFAULT_OUTPUT,
        metavar="FILE",
        help="Path for the output Markdown file (default: %(default)s)",
    )
    parser.add_argument(
        "--exclude",
        action="append",
        default=None,
        metavar="PATTERNS",
        help="Comma-separated extra glob patterns to exclude (use '/' separators). "
        "Can be repeated",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=default_workers(),
        metavar="N",
        help="Number of concurrent workers for reading file contents "
        "(default: %(default)s, the number of CPU cores)",
    )
    parser.add_argument(
        "--ignore-file",
        type=str,
        default=DEFAULT_RULE_FILENAME,
        dest="ignore_file",
        metavar="NAME",
        help="Name of the per-directory ignore file (default: %(default)s)",
    )
    parser.add_argument(
        "--no-respect-gitignore",
        action="store_true",
        dest="no_respect_gitignore",
        help="Disable ignore file integration",
    )
    parser.add_argument(
        "--no-default-excludes",
        action="store_true",
        dest="no_default_excludes",
        help="Disable the built-in default ignore patterns",
    )
    parser.add_argument(
        "--list-files",
        action="store_true",
        dest="list_files",
        help="Print the selected entries without writing the output file",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("-q", "--quiet", action="store_true", help="Only log warnings and errors")
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version information and exit",
    )
    opts = parser.parse_args(args)

    # Track which flags the user explicitly set (for config merge precedence).
    # We use argparse sentinel defaults to detect actual CLI presence rather than
    # comparing against default values (which fails when user passes the default).
    _SENTINEL = object()
    _tracked_flags: dict[str, str] = {
        # argparse dest name -> Options field name
        "root": "root",
        "output": "output",
        "exclude": "exclude",
        "workers": "workers",
        "ignore_file": "ignore_file",
        "no_respect_gitignore": "respect_gitignore",
        "no_default_excludes": "default_excludes",
    }
    sentinel_parser = argparse.ArgumentParser(add_help=False)
    sentinel_parser.add_argument("--root", default=_SENTINEL)
    sentinel_parser.add_argument("-o", "--output", default=_SENTINEL)
    sentinel_parser.add_argument("--exclude", action="append", default=None)
    sentinel_parser.add_argument("--workers", default=_SENTINEL)
    sentinel_parser.add_argument("--ignore-file", dest="ignore_file", default=_SENTINEL)
    sentinel_parser.add_argument(
        "--no-respect-gitignore",
        dest="no_respect_gitignore",
        action="store_true",
        default=_SENTINEL,
    )
    sentinel_parser.add_argument(
        "--no-default-excludes",
        dest="no_default_excludes",
        action="store_true",
        default=_SENTINEL,
    )
    sentinel_opts, _ = sentinel_parser.parse_known_args(args if args is not None else sys.argv[1:])

    explicit_flags: set[str] = set()
    for dest_name, field_name in _tracked_flags.items():
        val = getattr(sentinel_opts, dest_name, _SENTINEL)
        # For append actions, None means not supplied; a list means supplied
        if dest_name == "exclude":
            if val is not None:
                explicit_flags.add(field_name)
        elif val is not _SENTINEL:
            explicit_flags.add(field_name)

    return (
        Options(
            root=opts.root,
            output=opts.output,
            exclude=_split_patterns(opts.exclude),
            workers=opts.workers,
            ignore_file=opts.ignore_file,
            respect_gitignore=not opts.no_respect_gitignore,
            default_excludes=not opts.no_default_excludes,
            list_files=opts.list_files,
            verbose=opts.verbose,
            quiet=opts.quiet,
            version=opts.version,
        ),
        explicit_flags,
    )


def _executable_path() -> Path | None:
    """
    Best-effort path of the installed console script, so it never packs itself.
    Returns `None` when running from a `.py` source file.
    """
    argv0 = sys.argv[0] if sys.argv else ""
    if not argv0:
        return None
    try:
        path = Path(argv0).resolve()
    except OSError as e:
        logger.warning("Could not determine executable path: %s. Self-exclusion might fail.", e)
        return None
    # Under `python -m` or `python cli.py` argv[0] is a source file, not the tool.
    if path.suffix == ".py" or not path.is_file():
        return None
    return path


def _pack_options(options: Options) -> PackOptions:
    return PackOptions(
        root=Path(options.root),
        output=Path(options.output),
        exclude=list(options.exclude),
        workers=options.workers,
        executable_path=_executable_path(),
        respect_gitignore=options.respect_gitignore,
        use_default_excludes=options.default_excludes,
        ignore_filename=options.ignore_file,
    )


def main(args: list[str] | None = None) -> int:
    """
    Main entry point for the promptpacker CLI.

    Args:
        args: Command-line arguments (uses sys.argv if None)

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    options, explicit_flags = _parse_args(args)

    # Display version information if requested
    if options.version:
        try:
            version = importlib.metadata.version("promptpacker")
            print(f"v{version}")
        except importlib.metadata.PackageNotFoundError:
            print("unknown (package not installed)")
        return 0

    if options.verbose:
        configure_logging("DEBUG")
    elif options.quiet:
        configure_logging("WARNING")
    else:
        configure_logging()

    # Load and merge config file settings
    config_path = find_config_file(Path.cwd())
    if config_path:
        logger.debug("Using config file %s", config_path)
        merge_cli_with_config(options, load_config(config_path), explicit_flags)

    pack_options = _pack_options(options)
    if not pack_options.root.is_dir():
        logger.error("Root directory not found: %s", pack_options.root)
        return 1

    try:
        # Handle --list-files mode (print and exit)
        if options.list_files:
            for entry in select_entries(pack_options):
                print(entry.rel_path + ("/" if entry.is_dir else ""))
            return 0

        result = pack_directory(pack_options)
    except OutputWriteError as e:
        logger.error("%s", e)
        return 1
    except (PackCancelled, KeyboardInterrupt):
        logger.error("Cancelled")
        return 130

    if result.ok:
        print(f"Successfully created {result.output}")
    else:
        print(f"Created {result.output} (with {result.content_errors} file errors noted above)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
