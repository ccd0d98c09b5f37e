"""
Core manifest engine — discovery, naming, hashing, line formatting and writing.

This package contains the whole checksum-manifest pipeline:
- PathResolver: canonical, validated search and save paths
- FileDiscovererImpl: recursive traversal with a deterministic global order
- OutputNamer: aggregate / per-directory / per-file manifest naming
- HasherImpl + algorithms: MD5 (default), SHA, xxHash file digests
- DigestLineCodec: md5sum-compatible text and binary lines
- ManifestWriter: append-only writes with .bak backups
- ProgressTracker: whole-number percent and elapsed-time summaries
- ManifestEngine: the run state machine tying everything together

No terminal or CLI dependencies — suitable for library and server usage.
"""

from .models import (
    ALL_FILES, OutputMode, ChecksumMode, CollisionPolicy, RunState,
    RunConfig, DiscoveredFile, OutputTarget, Digest, ChecksumEntry,
    ProgressState, RunResult)
from .errors import (
    TreeSumError, UsageError, PathError, NamingError, NamingCollisionError,
    FormatError, UnreadableFileWarning)
from .resolver import PathResolver
from .scanner import FileDiscovererImpl, discovery_sort_key
from .namer import OutputNamer, flatten_path
from .codec import DigestLineCodec
from .hasher import HasherImpl, ExternalToolHasher, get_algorithm, ALGORITHMS
from .writer import ManifestWriter, ManifestHandle
from .progress import ProgressTracker, LoggingProgressSink, NullProgressSink
from .engine import ManifestEngine

__all__ = [
    "ALL_FILES",
    "OutputMode",
    "ChecksumMode",
    "CollisionPolicy",
    "RunState",
    "RunConfig",
    "DiscoveredFile",
    "OutputTarget",
    "Digest",
    "ChecksumEntry",
    "ProgressState",
    "RunResult",
    "TreeSumError",
    "UsageError",
    "PathError",
    "NamingError",
    "NamingCollisionError",
    "FormatError",
    "UnreadableFileWarning",
    "PathResolver",
    "FileDiscovererImpl",
    "discovery_sort_key",
    "OutputNamer",
    "flatten_path",
    "DigestLineCodec",
    "HasherImpl",
    "ExternalToolHasher",
    "get_algorithm",
    "ALGORITHMS",
    "ManifestWriter",
    "ManifestHandle",
    "ProgressTracker",
    "LoggingProgressSink",
    "NullProgressSink",
    "ManifestEngine"
]
