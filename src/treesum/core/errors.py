"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/errors.py
Exceptions raised by the manifest engine.

Validation errors (UsageError, PathError) abort a run before anything is written.
NamingError is fatal mid-run; manifests already written stay on disk.
FormatError and UnreadableFileWarning are isolated to a single file.
"""

from typing import Optional


class TreeSumError(Exception):
    """Base class for all treesum errors."""


class UsageError(TreeSumError):
    """Invalid invocation, or a plain file given where a directory is required."""


class PathError(TreeSumError):
    """Search or save path missing, not a directory, or not writable."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class NamingError(TreeSumError):
    """A file path cannot be reduced to a non-empty manifest name."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class NamingCollisionError(NamingError):
    """Two unrelated directories resolved to the same manifest file."""

    def __init__(self, target: str, first_dir: str, second_dir: str):
        super().__init__(
            f"Manifest name collision: \"{first_dir}\" and \"{second_dir}\" "
            f"both map to \"{target}\"",
            path=second_dir
        )
        self.target = target
        self.first_dir = first_dir
        self.second_dir = second_dir


class FormatError(TreeSumError):
    """A digest line carries neither the text nor the binary mode marker."""

    def __init__(self, message: str, line: str = ""):
        super().__init__(message)
        self.line = line


class UnreadableFileWarning(UserWarning):
    """A discovered file could not be read; it is skipped."""
