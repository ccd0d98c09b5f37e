"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/namer.py
Maps discovered files to manifest files.

NAMING MODES
------------
AGGREGATE      : <save>/<flattened search path>[_tag].md5, one target per run
PER_DIRECTORY  : <save>/<grandparent>_<parent>[_tag].md5
PER_FILE       : <save>/<flattened containing directory>[_tag].md5

Flattening replaces every path separator with "-" and strips the leading dash.
The extension follows the digest algorithm (".md5" by default).

COLLISIONS
----------
Distinct directories may map to the same manifest (e.g. /x/a/b and /y/a/b in
per-directory mode). The namer remembers which directory first claimed each
target; a second directory either raises NamingCollisionError or is merged
with a warning, depending on the run's CollisionPolicy.
"""

import os
import logging
from typing import Dict, Optional, Set

from treesum.core.models import (
    CollisionPolicy, DiscoveredFile, OutputMode, OutputTarget, RunConfig
)
from treesum.core.errors import NamingCollisionError, NamingError

logger = logging.getLogger(__name__)


def flatten_path(path: str, max_leading: int = 1) -> str:
    """
    Replace path separators with "-" and strip up to `max_leading` leading dashes.
    """
    flat = path.replace(os.sep, "-")
    if os.altsep:
        flat = flat.replace(os.altsep, "-")
    for _ in range(max_leading):
        if flat.startswith("-"):
            flat = flat[1:]
    return flat


def with_tag(base: str, tag: str) -> str:
    return f"{base}_{tag}" if tag else base


class OutputNamer:
    """
    Computes the OutputTarget for each discovered file of a run.
    One instance per run: it keeps the aggregate name and the collision ledger.
    """

    def __init__(self, extension: str = ".md5"):
        self.extension = extension if extension.startswith(".") else f".{extension}"
        self._aggregate: Optional[OutputTarget] = None
        self._owners: Dict[str, str] = {}
        self._merged: Set[str] = set()

    def reset(self) -> None:
        self._aggregate = None
        self._owners.clear()
        self._merged.clear()

    def name(self, file: DiscoveredFile, config: RunConfig) -> OutputTarget:
        mode = config.output_mode
        if mode == OutputMode.AGGREGATE:
            return self.aggregate_target(config)
        if mode == OutputMode.PER_DIRECTORY:
            base = self._per_directory_base(file)
        elif mode == OutputMode.PER_FILE:
            base = self._per_file_base(file)
        else:
            raise ValueError(f"Unsupported output mode: {mode!r}")

        target = OutputTarget(
            path=os.path.join(config.save_path, with_tag(base, config.tag) + self.extension),
            append=True
        )
        self._claim(target, file.directory, config.collision_policy)
        return target

    def aggregate_target(self, config: RunConfig) -> OutputTarget:
        """The single aggregate manifest, computed once per run from the search path."""
        if self._aggregate is None:
            base = flatten_path(config.search_path)
            if not base:
                raise NamingError(
                    f"Cannot derive a manifest name from search path \"{config.search_path}\"",
                    path=config.search_path
                )
            self._aggregate = OutputTarget(
                path=os.path.join(config.save_path, with_tag(base, config.tag) + self.extension),
                append=False
            )
            logger.debug(f"Aggregate target: {self._aggregate.path}")
        return self._aggregate

    @staticmethod
    def _per_directory_base(file: DiscoveredFile) -> str:
        parent_dir = file.directory
        parent = os.path.basename(parent_dir)
        grandparent = os.path.basename(os.path.dirname(parent_dir))

        if not parent:
            raise NamingError(
                f"Error transforming file path into output file prefix: \"{file.path}\"",
                path=file.path
            )
        # No grandparent segment: omit it together with its separator
        return f"{grandparent}_{parent}" if grandparent else parent

    @staticmethod
    def _per_file_base(file: DiscoveredFile) -> str:
        # A doubled leading dash comes from a root-level path and is stripped in one go
        base = flatten_path(file.directory, max_leading=2)
        if not base:
            raise NamingError(
                f"Error transforming file path into output file prefix: \"{file.path}\"",
                path=file.path
            )
        return base

    def _claim(self, target: OutputTarget, directory: str, policy: CollisionPolicy) -> None:
        owner = self._owners.setdefault(target.path, directory)
        if owner == directory:
            return
        if policy == CollisionPolicy.ERROR:
            raise NamingCollisionError(target.path, owner, directory)
        if target.path not in self._merged:
            self._merged.add(target.path)
            logger.warning(
                f"Merging \"{directory}\" into \"{target.path}\" "
                f"(already used by \"{owner}\")"
            )
