"""
treesum — reproducible checksum manifests for directory trees.

Core features:
- Three output modes: AGGREGATE (one manifest), PER_DIRECTORY (grandparent_parent), PER_FILE (flattened directory path)
- md5sum-compatible manifest lines (text and binary markers), MD5 by default, SHA and xxHash available
- Deterministic, case-insensitive byte order of files; existing aggregate manifests kept as .bak
- CLI interface for headless/server usage
"""

# Get version
from importlib.metadata import PackageNotFoundError, version as _version

try:
    __version__ = _version("treesum")
except PackageNotFoundError:
    __version__ = "0.0.0"

# Public API — only what users should import directly
from treesum.commands import ManifestCommand
from treesum.core import (
    RunConfig, RunResult, OutputMode, ChecksumMode, CollisionPolicy, ManifestEngine,
    DigestLineCodec, TreeSumError, UsageError, PathError, NamingError, FormatError)
from treesum.utils.convert_utils import ConvertUtils
from treesum.services.file_service import FileService

__all__ = [
    "ManifestCommand",
    "ManifestEngine",
    "RunConfig",
    "RunResult",
    "OutputMode",
    "ChecksumMode",
    "CollisionPolicy",
    "DigestLineCodec",
    "TreeSumError",
    "UsageError",
    "PathError",
    "NamingError",
    "FormatError",
    "ConvertUtils",
    "FileService",
    "__version__",
]
