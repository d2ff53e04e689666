"""Exceptions raised while packing a directory."""

from __future__ import annotations


class PackerError(Exception):
    """Base class for promptpacker errors."""


class TraversalAccessError(PackerError):
    """A filesystem entry could not be listed or statted during the walk."""


class RuleFileReadError(PackerError):
    """An ignore rule file exists but could not be read."""


class ContentReadError(PackerError):
    """A selected file could not be opened or fully read."""


class OutputWriteError(PackerError):
    """The report file could not be created or written."""


class PackCancelled(PackerError):
    """The run was cancelled before the report was written."""
