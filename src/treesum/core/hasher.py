"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

hasher.py
Implements whole-file hashing using pluggable hash algorithms.

HasherImpl streams a file through any HashAlgorithm (MD5 by default, as md5sum does).
ExternalToolHasher runs a digest tool such as md5sum and re-reads its output line,
for setups that must match a specific tool exactly.
"""

import os
import shutil
import hashlib
import logging
import subprocess
from typing import Dict, List

import xxhash

from treesum.core.models import ChecksumMode, Digest
from treesum.core.interfaces import Hasher, HashAlgorithm, HashObject
from treesum.core.codec import DigestLineCodec
from treesum.core.errors import UsageError

logger = logging.getLogger(__name__)

READ_CHUNK_SIZE = 1024 * 1024


# Use the same way to implement and use any other hashing algorithm
class Md5AlgorithmImpl(HashAlgorithm):
    name = "md5"
    extension = ".md5"

    def new(self) -> HashObject:
        return hashlib.md5()


class Sha1AlgorithmImpl(HashAlgorithm):
    name = "sha1"
    extension = ".sha1"

    def new(self) -> HashObject:
        return hashlib.sha1()


class Sha256AlgorithmImpl(HashAlgorithm):
    name = "sha256"
    extension = ".sha256"

    def new(self) -> HashObject:
        return hashlib.sha256()


class XXHash64AlgorithmImpl(HashAlgorithm):
    name = "xxh64"
    extension = ".xxh64"

    def new(self) -> HashObject:
        return xxhash.xxh64()


class XXHash128AlgorithmImpl(HashAlgorithm):
    name = "xxh128"
    extension = ".xxh128"

    def new(self) -> HashObject:
        return xxhash.xxh128()


ALGORITHMS: Dict[str, HashAlgorithm] = {
    algorithm.name: algorithm
    for algorithm in (
        Md5AlgorithmImpl(),
        Sha1AlgorithmImpl(),
        Sha256AlgorithmImpl(),
        XXHash64AlgorithmImpl(),
        XXHash128AlgorithmImpl(),
    )
}


def get_algorithm(name: str) -> HashAlgorithm:
    try:
        return ALGORITHMS[name.strip().lower()]
    except KeyError:
        raise ValueError(
            f"Unknown digest algorithm: '{name}'. "
            f"Supported: {', '.join(sorted(ALGORITHMS))}"
        )


class HasherImpl(Hasher):
    """
    A hasher implementation that supports any algorithm via the HashAlgorithm interface.
    The read mode only changes the manifest marker; bytes are hashed as-is.
    """

    def __init__(self, algorithm: HashAlgorithm = None, chunk_size: int = READ_CHUNK_SIZE):
        self.algorithm = algorithm or Md5AlgorithmImpl()
        self.chunk_size = chunk_size

    @property
    def extension(self) -> str:
        return self.algorithm.extension

    def hash_file(self, path: str, mode: ChecksumMode = ChecksumMode.TEXT) -> Digest:
        """Raises OSError when the file cannot be opened or read."""
        hash_object = self.algorithm.new()
        with open(path, "rb") as f:
            for chunk in iter(lambda: f.read(self.chunk_size), b""):
                hash_object.update(chunk)
        return Digest(hex=hash_object.hexdigest(), mode=mode)


class ExternalToolHasher(Hasher):
    """
    Runs an external digest tool (md5sum, sha256sum...) on each file and parses
    its output line with DigestLineCodec.

    Raises FormatError from hash_file when the tool prints a line with no mode marker.
    """

    def __init__(self, tool: str = "md5sum", timeout: float = None):
        executable = shutil.which(tool)
        if executable is None:
            raise UsageError(f"Digest tool not found: {tool}")
        self.tool = tool
        self.executable = executable
        self.timeout = timeout
        self.extension = "." + os.path.basename(tool).replace("sum", "")

    def build_command(self, path: str, mode: ChecksumMode) -> List[str]:
        command = [self.executable]
        if mode == ChecksumMode.BINARY:
            command.append("--binary")
        command.extend(["--", path])
        return command

    def hash_file(self, path: str, mode: ChecksumMode = ChecksumMode.TEXT) -> Digest:
        try:
            completed = subprocess.run(
                self.build_command(path, mode),
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise OSError(f"{self.tool} timed out on {path}") from e

        if completed.returncode != 0:
            message = os.fsdecode(completed.stderr).strip() or f"exit status {completed.returncode}"
            raise OSError(f"{self.tool} failed on {path}: {message}")

        output = os.fsdecode(completed.stdout)
        # Split on "\n" only; a raw "\r" from an older tool is part of the name
        line = output.split("\n", 1)[0]
        entry = DigestLineCodec.parse(line)
        return Digest(hex=entry.digest_hex, mode=entry.mode)
