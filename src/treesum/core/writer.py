"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/writer.py
Appends manifest lines to output targets.

Every line is written and flushed on its own, so an interrupted run leaves only
complete lines behind. A target is prepared once per run, right before its first
write:
- append=False targets (aggregate mode) that already exist are renamed to
  <name-without-ext>_<run start seconds>.bak
- append=True targets are left alone, or discarded (moved to trash) when the run
  asked to clear existing manifests
"""

import os
import logging
from typing import BinaryIO, Callable, List, Optional, Set

from treesum.core.models import OutputTarget

logger = logging.getLogger(__name__)


class ManifestHandle:
    """Opaque reference to a target opened by ManifestWriter."""

    def __init__(self, target: OutputTarget):
        self.target = target

    @property
    def path(self) -> str:
        return self.target.path

    def __repr__(self):
        return f"<ManifestHandle path={self.path}>"


class ManifestWriter:
    """
    Appends lines to manifests. Only one file object is kept open at a time;
    switching targets closes the previous one, reopening is always in append mode.
    """

    def __init__(
        self,
        run_started_at: int,
        clear_existing: bool = False,
        discard: Optional[Callable[[str], None]] = None
    ):
        self.run_started_at = int(run_started_at)
        self.clear_existing = clear_existing
        self.discard = discard
        self.backups: List[str] = []
        self.discarded: List[str] = []
        self.targets: List[str] = []
        self._prepared: Set[str] = set()
        self._current_path: Optional[str] = None
        self._current_file: Optional[BinaryIO] = None

    def __enter__(self) -> "ManifestWriter":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def open(self, target: OutputTarget) -> ManifestHandle:
        """Idempotent within a run: creates the file if absent, otherwise appends."""
        if target.path not in self._prepared:
            self._prepare(target)
            self._prepared.add(target.path)
            self.targets.append(target.path)
        self._switch_to(target.path)
        return ManifestHandle(target)

    def write(self, handle: ManifestHandle, line: str) -> None:
        if handle.path not in self._prepared:
            raise ValueError(f"Target was not opened in this run: {handle.path}")
        self._switch_to(handle.path)
        self._current_file.write(os.fsencode(line) + b"\n")
        self._current_file.flush()

    def close(self) -> None:
        if self._current_file is not None:
            try:
                self._current_file.close()
            finally:
                self._current_file = None
                self._current_path = None

    def backup_path_for(self, path: str) -> str:
        """<target-without-ext>_<unix seconds at run start>.bak, made unique if taken."""
        stem, _ = os.path.splitext(path)
        candidate = f"{stem}_{self.run_started_at}.bak"
        counter = 1
        while os.path.exists(candidate):
            candidate = f"{stem}_{self.run_started_at}_{counter}.bak"
            counter += 1
        return candidate

    def _prepare(self, target: OutputTarget) -> None:
        if not os.path.exists(target.path):
            return

        if not target.append:
            backup = self.backup_path_for(target.path)
            logger.info(f"Existing output file detected, moving to: {backup}")
            os.rename(target.path, backup)
            self.backups.append(backup)
        elif self.clear_existing and self.discard is not None:
            logger.info(f"Clearing existing output file: {target.path}")
            self.discard(target.path)
            self.discarded.append(target.path)

    def _switch_to(self, path: str) -> None:
        if self._current_path == path and self._current_file is not None:
            return
        self.close()
        self._current_file = open(path, "ab")
        self._current_path = path
