"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/resolver.py
Canonicalizes and validates the search and save paths of a run.
Paths are resolved physically (symlinks followed, relative components removed)
so that manifest names derived from them are stable.
"""

import os
import logging
from pathlib import Path
from typing import Optional, Tuple

from treesum.core.errors import PathError, UsageError

logger = logging.getLogger(__name__)


class PathResolver:
    """
    Resolves (search_path, save_path) to canonical absolute directories.

    Raises UsageError when a plain file is supplied where a directory is expected,
    PathError when a path does not exist, is not a directory, or (save path only)
    is not writable by the current user.
    """

    def resolve(self, search_path: str, save_path: Optional[str] = None) -> Tuple[str, str]:
        if not search_path:
            raise UsageError("A search path is required")

        save_path = save_path or os.getcwd()

        # A file given where a directory is expected is a usage problem, checked first
        for label, raw in (("search", search_path), ("save", save_path)):
            if os.path.isfile(raw):
                raise UsageError(f"The {label} path is a file, expected a directory: \"{raw}\"")

        resolved_search = self._canonical_dir(search_path, "Search path")
        resolved_save = self._canonical_dir(save_path, "Save path")

        if not os.access(resolved_save, os.W_OK | os.X_OK):
            raise PathError(
                f"No write access to save path: \"{resolved_save}\"",
                path=resolved_save
            )

        logger.debug(f"Resolved search path: {search_path} -> {resolved_search}")
        logger.debug(f"Resolved save path: {save_path} -> {resolved_save}")
        return resolved_search, resolved_save

    @staticmethod
    def _canonical_dir(raw: str, label: str) -> str:
        try:
            resolved = Path(raw).expanduser().resolve(strict=True)
        except FileNotFoundError:
            raise PathError(f"{label} does not exist: \"{raw}\"", path=raw)
        except (OSError, RuntimeError) as e:
            # RuntimeError: symlink loop on older interpreters
            raise PathError(f"{label} cannot be resolved: \"{raw}\" ({e})", path=raw)

        if not resolved.is_dir():
            raise PathError(f"{label} is not a directory: \"{resolved}\"", path=str(resolved))
        return str(resolved)
