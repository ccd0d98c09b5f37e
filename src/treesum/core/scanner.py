"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/scanner.py
Implements file discovery for manifest generation.
Features:
- Recursively walks the search path with os.walk (no external find process)
- Keeps regular files only; symlinks, directories and special files are skipped
- Optional case-insensitive extension filter ("**" = all files)
- Returns a list sorted in one global order so output is reproducible
"""

import os
import stat
import time
import logging
from typing import List, Optional, Callable, Tuple

logger = logging.getLogger(__name__)

# Local imports
from treesum.core.models import DiscoveredFile, ALL_FILES
from treesum.core.interfaces import FileDiscoverer


def discovery_sort_key(path: str) -> Tuple[bytes, bytes]:
    """
    Byte-wise, case-insensitive ordering of full paths (same as `LC_ALL=C sort -f`).
    ASCII letters are folded to upper case; ties fall back to the raw bytes so the
    order stays total.
    """
    raw = os.fsencode(path)
    return raw.upper(), raw


class FileDiscovererImpl(FileDiscoverer):
    """
    Walks a directory tree and collects matching regular files.

    Attributes:
        progress_callback: Optional callable receiving the running count of found files
        progress_interval: How many found files between progress_callback calls
    """

    def __init__(
        self,
        progress_callback: Optional[Callable[[int], None]] = None,
        progress_interval: int = 1000
    ):
        self.progress_callback = progress_callback
        self.progress_interval = max(1, progress_interval)

    def discover(self, search_path: str, extension_filter: str = ALL_FILES) -> List[DiscoveredFile]:
        """
        Single-pass walk. Every call walks the tree again; nothing is cached.
        Unreadable subdirectories are skipped without failing the walk.
        """
        logger.debug(f"Starting discovery in: {search_path}")
        logger.debug(f"Extension filter: {extension_filter}")

        if not os.path.isdir(search_path):
            error_msg = f"Not a directory: {search_path}"
            logger.error(error_msg)
            raise NotADirectoryError(error_msg)

        suffix = None
        if extension_filter and extension_filter != ALL_FILES:
            suffix = "." + extension_filter.lower()

        found: List[str] = []
        start_time = time.time()

        for root, dirs, files in os.walk(search_path, onerror=self._on_walk_error):
            # Pre-filter subdirectories BEFORE os.walk enters them
            dirs[:] = [d for d in dirs if self._prefilter_dir(os.path.join(root, d))]

            for filename in files:
                if suffix and not filename.lower().endswith(suffix):
                    continue
                path = os.path.join(root, filename)
                if not self._is_regular_file(path):
                    continue
                found.append(path)

                if self.progress_callback and len(found) % self.progress_interval == 0:
                    self.progress_callback(len(found))

        if self.progress_callback and found and len(found) % self.progress_interval:
            self.progress_callback(len(found))

        found.sort(key=discovery_sort_key)

        logger.debug(f"Discovery finished in {time.time() - start_time:.2f} seconds")
        logger.debug(f"Found {len(found)} matching files")
        return [DiscoveredFile(path=p) for p in found]

    def count(self, search_path: str, extension_filter: str = ALL_FILES) -> int:
        return len(self.discover(search_path, extension_filter))

    @staticmethod
    def _on_walk_error(error: OSError) -> None:
        logger.debug(f"Skipping unreadable directory: {error.filename} ({error.strerror})")

    @staticmethod
    def _prefilter_dir(path: str) -> bool:
        """Skip symlinked and inaccessible directories."""
        try:
            if os.path.islink(path):
                logger.debug(f"Skipping symbolic link to directory: {path}")
                return False
            return os.access(path, os.R_OK | os.X_OK)
        except OSError:
            logger.debug(f"Skipping inaccessible directory: {path}")
            return False

    @staticmethod
    def _is_regular_file(path: str) -> bool:
        try:
            mode = os.lstat(path).st_mode
        except OSError as e:
            logger.debug(f"Could not stat {path}: {e}")
            return False
        if stat.S_ISLNK(mode):
            logger.debug(f"Skipping symbolic link: {path}")
            return False
        return stat.S_ISREG(mode)
