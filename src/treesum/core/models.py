"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/models.py
Data models for checksum-manifest generation: run configuration, discovered files,
output targets, checksum entries and progress state.
"""

from dataclasses import dataclass, field, replace
from typing import List, Optional, Tuple
import os
from enum import Enum


ALL_FILES = "**"


# =============================
# Enums
# =============================

class OutputMode(Enum):
    """
    How discovered files are grouped into manifest files.
    """
    AGGREGATE = "aggregate"
    PER_DIRECTORY = "per-directory"
    PER_FILE = "per-file"

    @property
    def display_name(self) -> str:
        """Human-readable name for UI display."""
        mapping = {
            OutputMode.AGGREGATE: "Aggregate",
            OutputMode.PER_DIRECTORY: "Per directory",
            OutputMode.PER_FILE: "Per file",
        }
        return mapping.get(self, self.value)

    @property
    def description(self) -> str:
        """Detailed description for help text."""
        mapping = {
            OutputMode.AGGREGATE:
                "One manifest for the whole run, named after the search path",
            OutputMode.PER_DIRECTORY:
                "One manifest per grandparent_parent directory pair",
            OutputMode.PER_FILE:
                "One manifest per containing directory, named after its full path",
        }
        return mapping.get(self, self.value)

    def __repr__(self) -> str:
        return self.value


class ChecksumMode(Enum):
    """Read mode marker written between digest and file label."""
    TEXT = "text"
    BINARY = "binary"

    @property
    def marker(self) -> str:
        return "*" if self is ChecksumMode.BINARY else " "


class CollisionPolicy(Enum):
    """
    What to do when unrelated directories resolve to the same manifest file.
    """
    ERROR = "error"
    MERGE = "merge"


class RunState(str, Enum):
    IDLE = "Idle"
    RESOLVING = "Resolving"
    DISCOVERING = "Discovering"
    NO_FILES_FOUND = "NoFilesFound"
    PROCESSING = "Processing"
    COMPLETED = "Completed"
    FATAL = "Fatal"

    @property
    def is_terminal(self) -> bool:
        return self in (RunState.NO_FILES_FOUND, RunState.COMPLETED, RunState.FATAL)


# ======================
#  Core Data Models
# ======================

@dataclass(frozen=True)
class DiscoveredFile:
    """
    A regular file found under the search path.
    Only the absolute path is stored; naming attributes are derived on demand.
    """
    path: str

    @property
    def name(self) -> str:
        return os.path.basename(self.path)

    @property
    def directory(self) -> str:
        return os.path.dirname(self.path)

    def __repr__(self):
        return f"<DiscoveredFile path={self.path}>"


@dataclass(frozen=True)
class OutputTarget:
    """
    A manifest file on disk.

    append=True: lines accumulate across runs (per-directory / per-file modes).
    append=False: a file already present before the run is moved to a .bak first.
    """
    path: str
    append: bool = True

    @property
    def name(self) -> str:
        return os.path.basename(self.path)


@dataclass(frozen=True)
class Digest:
    """Result of hashing one file."""
    hex: str
    mode: ChecksumMode = ChecksumMode.TEXT


@dataclass(frozen=True)
class ChecksumEntry:
    """One manifest line: digest, read mode and basename-only label."""
    digest_hex: str
    mode: ChecksumMode
    file_label: str

    def __post_init__(self):
        # Digests are compared and written in lower case, as md5sum prints them
        object.__setattr__(self, "digest_hex", self.digest_hex.lower())


@dataclass(frozen=True)
class ProgressState:
    """
    Progress counters threaded through the engine loop.
    last_emitted_percent starts at -1 so that 0% is always reported once.
    """
    processed_count: int = 0
    total_count: int = 0
    last_emitted_percent: int = -1

    def advance(self, processed_count: int) -> Tuple["ProgressState", Optional[int]]:
        """
        Returns the next state and the percent to emit, or None when unchanged.
        """
        if self.total_count <= 0:
            raise ValueError("Total count must be positive")
        percent = (processed_count * 100) // self.total_count
        if percent == self.last_emitted_percent:
            return replace(self, processed_count=processed_count), None
        return replace(
            self,
            processed_count=processed_count,
            last_emitted_percent=percent
        ), percent


@dataclass
class RunResult:
    """
    Outcome of a single engine run, returned to the caller (CLI or library user).
    """
    state: RunState
    total_count: int = 0
    processed_count: int = 0
    skipped_count: int = 0
    failed_count: int = 0
    elapsed_text: str = ""
    message: str = ""
    targets: List[str] = field(default_factory=list)
    backups: List[str] = field(default_factory=list)

    @property
    def summary(self) -> str:
        return f"{self.processed_count} files processed in {self.elapsed_text}"

    def __repr__(self):
        return f"<RunResult state={self.state.value}, processed={self.processed_count}/{self.total_count}>"


"""
DTO for a manifest run with built-in validation.
Interface-agnostic — built by the CLI or by library callers.
"""

@dataclass(frozen=True)
class RunConfig:
    """Resolved parameters for a manifest run with validation."""
    search_path: str
    save_path: str
    extension_filter: str = ALL_FILES
    tag: str = ""
    output_mode: OutputMode = OutputMode.AGGREGATE
    checksum_mode: ChecksumMode = ChecksumMode.TEXT
    algorithm: str = "md5"
    collision_policy: CollisionPolicy = CollisionPolicy.ERROR
    clear_existing: bool = False
    workers: int = 1

    def __post_init__(self):
        """Validate parameters immediately after creation."""
        from treesum.core.hasher import get_algorithm

        if not self.search_path:
            raise ValueError("Search path cannot be empty")

        if not self.save_path:
            raise ValueError("Save path cannot be empty")

        if self.workers < 1:
            raise ValueError("Worker count must be at least 1")

        # Raises ValueError for names outside the algorithm registry
        object.__setattr__(self, "algorithm", get_algorithm(self.algorithm or "").name)

        tag = (self.tag or "").strip()
        if os.sep in tag or (os.altsep and os.altsep in tag):
            raise ValueError(f"Tag cannot contain a path separator: '{tag}'")
        object.__setattr__(self, "tag", tag)

        # Normalize the extension filter: no leading dot, "**" or empty means all files
        ext = (self.extension_filter or ALL_FILES).strip()
        if ext != ALL_FILES:
            ext = ext.lstrip(".")
            if not ext:
                ext = ALL_FILES
        object.__setattr__(self, "extension_filter", ext)

    @property
    def filters_extension(self) -> bool:
        return self.extension_filter != ALL_FILES

    @staticmethod
    def from_human_readable(
            search_path: str,
            save_path: Optional[str] = None,
            extension_filter: str = ALL_FILES,
            tag: str = "",
            mode: str = "aggregate",
            binary: bool = False,
            algorithm: str = "md5",
            allow_merge: bool = False,
            clear_existing: bool = False,
            workers: int = 1,
    ) -> 'RunConfig':
        """
        Factory method to create a config from raw, already-resolved inputs.
        Useful for CLI argument parsing; mode accepts the aliases of treesum.aliases.
        """
        from treesum.aliases import OUTPUT_MODE_ALIASES

        try:
            output_mode = OUTPUT_MODE_ALIASES[mode.strip().lower()]
        except KeyError:
            raise ValueError(f"Unknown output mode: '{mode}'")

        return RunConfig(
            search_path=search_path,
            save_path=save_path or os.getcwd(),
            extension_filter=extension_filter,
            tag=tag,
            output_mode=output_mode,
            checksum_mode=ChecksumMode.BINARY if binary else ChecksumMode.TEXT,
            algorithm=algorithm.strip().lower(),
            collision_policy=CollisionPolicy.MERGE if allow_merge else CollisionPolicy.ERROR,
            clear_existing=clear_existing,
            workers=workers,
        )
