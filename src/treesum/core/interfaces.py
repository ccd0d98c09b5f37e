"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

interfaces.py

Defines core interfaces (Protocols) used throughout the manifest engine.
These protocols use Python's `typing.Protocol` for structural typing, so any
object with the right shape can be plugged in (tests use plain fakes).

Key Components:
---------------
- HashAlgorithm: Factory for incremental hash objects (MD5, SHA-256, xxHash...).
- Hasher: Computes the digest of a whole file.
- FileDiscoverer: Enumerates matching files under a search path in a fixed order.
- ProgressSink: Receives percent updates and the final summary line.
"""

from typing import Protocol, List
from treesum.core.models import ChecksumMode, Digest, DiscoveredFile


# ===== Interfaces =====

class HashObject(Protocol):
    """The incremental interface shared by hashlib and xxhash objects."""
    def update(self, data: bytes) -> None: ...
    def hexdigest(self) -> str: ...


class HashAlgorithm(Protocol):
    """
    Interface for generic hash algorithms.

    Allows plugging in different hashing functions like MD5, SHA-256 or xxHash
    without affecting naming or manifest formatting.
    """
    name: str
    extension: str

    def new(self) -> HashObject:
        """Returns a fresh incremental hash object."""
        ...


class Hasher(Protocol):
    """Interface for hashing a whole file."""
    extension: str  # manifest file extension, e.g. ".md5"

    def hash_file(self, path: str, mode: ChecksumMode = ChecksumMode.TEXT) -> Digest:
        """
        Raises:
            OSError: the file could not be read.
            FormatError: an external digest tool produced an unrecognized line.
        """
        ...


class FileDiscoverer(Protocol):
    """
    Interface for walking the search path.

    Methods:
        discover: Returns every matching regular file, sorted, as a fresh list per call.
    """
    def discover(self, search_path: str, extension_filter: str) -> List[DiscoveredFile]:
        ...


class ProgressSink(Protocol):
    """Rendering target for progress (terminal, log, event stream...)."""
    def on_percent(self, percent: int) -> None: ...
    def on_summary(self, summary: str) -> None: ...
