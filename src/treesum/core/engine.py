"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/engine.py
Manifest generation engine.

STATE MACHINE
-------------
Idle -> Resolving -> Discovering -> NoFilesFound            (terminal)
                                 -> Processing -> Completed (terminal)
Any unrecoverable condition moves the engine to Fatal and re-raises.

PER-FILE STEPS (strict discovery order)
---------------------------------------
1. Name      : OutputNamer maps the file to its manifest (NamingError is fatal)
2. Check     : unreadable files are skipped with a warning, nothing is written
3. Hash      : Hasher computes the digest (FormatError is logged, file skipped)
4. Write     : DigestLineCodec formats the line, ManifestWriter appends it
5. Report    : ProgressTracker emits a percent when it changes

With workers > 1 digests are computed in a thread pool through an
order-preserving map; steps 1, 2 (result), 4 and 5 still run in this loop.
"""

import os
import time
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from typing import Callable, Iterator, List, Optional, Tuple

from treesum.core.models import (
    ChecksumEntry, Digest, DiscoveredFile, OutputMode, RunConfig, RunResult, RunState
)
from treesum.core.interfaces import FileDiscoverer, Hasher, ProgressSink
from treesum.core.errors import (
    FormatError, NamingError, PathError, UnreadableFileWarning, UsageError
)
from treesum.core.resolver import PathResolver
from treesum.core.scanner import FileDiscovererImpl
from treesum.core.namer import OutputNamer
from treesum.core.codec import DigestLineCodec
from treesum.core.hasher import HasherImpl, get_algorithm
from treesum.core.writer import ManifestWriter
from treesum.core.progress import LoggingProgressSink, ProgressTracker

logger = logging.getLogger(__name__)

NO_FILES_MESSAGE = "No files found matching that search pattern"

HashOutcome = Tuple[Optional[Digest], Optional[Exception]]


class ManifestEngine:
    """
    Runs one manifest generation pass for a RunConfig.
    Collaborators are injectable; defaults hash natively with the config's algorithm.
    """

    def __init__(
        self,
        hasher: Optional[Hasher] = None,
        discoverer: Optional[FileDiscoverer] = None,
        resolver: Optional[PathResolver] = None,
        sink: Optional[ProgressSink] = None,
        discard: Optional[Callable[[str], None]] = None,
        clock: Callable[[], float] = time.time
    ):
        self.hasher = hasher
        self.discoverer = discoverer or FileDiscovererImpl()
        self.resolver = resolver or PathResolver()
        self.sink = sink or LoggingProgressSink()
        self.discard = discard
        self.clock = clock
        self.codec = DigestLineCodec()
        self.state = RunState.IDLE
        self.result: Optional[RunResult] = None

    def run(self, config: RunConfig) -> RunResult:
        """
        Execute the whole pipeline.

        Raises:
            UsageError, PathError: before anything is written
            NamingError: mid-run; manifests already written are kept
        """
        self.result = None
        if config.clear_existing and self.discard is None:
            error = UsageError("Clearing existing manifests requires a discard callable")
            self._fail(error)
            raise error

        run_started_at = int(self.clock())
        hasher = self.hasher or HasherImpl(get_algorithm(config.algorithm))

        # Step 1: Resolve
        self.state = RunState.RESOLVING
        try:
            search_path, save_path = self.resolver.resolve(config.search_path, config.save_path)
        except (UsageError, PathError) as e:
            self._fail(e)
            raise
        config = replace(config, search_path=search_path, save_path=save_path)

        # Step 2: Discover
        self.state = RunState.DISCOVERING
        logger.info(f"Search path: {config.search_path}")
        discovery_start = self.clock()
        try:
            files = self.discoverer.discover(config.search_path, config.extension_filter)
        except OSError as e:
            self._fail(e)
            raise PathError(f"Cannot search path: \"{config.search_path}\" ({e})",
                            path=config.search_path) from e

        files = self._without_own_manifest(files, config, hasher)
        if not files:
            self.state = RunState.NO_FILES_FOUND
            logger.info(NO_FILES_MESSAGE)
            self.result = RunResult(state=self.state, message=NO_FILES_MESSAGE)
            return self.result

        logger.info(
            f"{len(files)} files found and sorted in "
            f"{ProgressTracker.summarize(discovery_start, self.clock())}"
        )

        # Step 3: Process
        self.state = RunState.PROCESSING
        return self._process(config, files, hasher, run_started_at)

    def _process(
        self,
        config: RunConfig,
        files: List[DiscoveredFile],
        hasher: Hasher,
        run_started_at: int
    ) -> RunResult:
        total = len(files)
        namer = OutputNamer(extension=hasher.extension)
        tracker = ProgressTracker(total_count=total)
        result = RunResult(state=self.state, total_count=total)
        self.result = result

        writer = ManifestWriter(
            run_started_at=run_started_at,
            clear_existing=config.clear_existing,
            discard=self.discard
        )

        executor = ThreadPoolExecutor(max_workers=config.workers) if config.workers > 1 else None
        start = self.clock()
        self._report(tracker.update(0))

        try:
            with writer:
                digests = self._digests(files, config, hasher, executor)
                for index, file in enumerate(files):
                    target = namer.name(file, config)
                    digest, problem = next(digests)

                    if isinstance(problem, UnreadableFileWarning):
                        logger.warning(str(problem))
                        result.skipped_count += 1
                    elif isinstance(problem, FormatError):
                        logger.warning(f"Skipping {file.path}: {problem}")
                        result.failed_count += 1
                    else:
                        entry = ChecksumEntry(
                            digest_hex=digest.hex,
                            mode=digest.mode,
                            file_label=file.name
                        )
                        handle = writer.open(target)
                        writer.write(handle, self.codec.format(entry))
                        result.processed_count += 1

                    self._report(tracker.update(index + 1))
        except (NamingError, OSError, RuntimeError) as e:
            # OSError: a manifest could not be written. RuntimeError: clearing failed
            self._fail(e)
            raise
        finally:
            if executor is not None:
                executor.shutdown(wait=False, cancel_futures=True)
            result.targets = list(writer.targets)
            result.backups = list(writer.backups)

        result.elapsed_text = ProgressTracker.summarize(start, self.clock())
        self.state = RunState.COMPLETED
        result.state = self.state
        self.sink.on_summary(result.summary)
        return result

    def _digests(
        self,
        files: List[DiscoveredFile],
        config: RunConfig,
        hasher: Hasher,
        executor: Optional[ThreadPoolExecutor]
    ) -> Iterator[HashOutcome]:
        """Yields one outcome per file, in discovery order."""
        def attempt(file: DiscoveredFile) -> HashOutcome:
            return self._hash_one(file, config, hasher)

        if executor is None:
            return (attempt(file) for file in files)
        return executor.map(attempt, files)

    @staticmethod
    def _without_own_manifest(
        files: List[DiscoveredFile],
        config: RunConfig,
        hasher: Hasher
    ) -> List[DiscoveredFile]:
        """
        Drops the aggregate manifest of this run from the file list. With the save
        path inside the search path it would be discovered, then renamed to .bak
        before its turn comes.
        """
        if config.output_mode != OutputMode.AGGREGATE:
            return files
        try:
            own = OutputNamer(extension=hasher.extension).aggregate_target(config).path
        except NamingError:
            # Reported by the processing loop
            return files
        kept = [file for file in files if file.path != own]
        if len(kept) != len(files):
            logger.debug(f"Excluding the run's own manifest from the file list: {own}")
        return kept

    @staticmethod
    def _hash_one(file: DiscoveredFile, config: RunConfig, hasher: Hasher) -> HashOutcome:
        if not os.path.lexists(file.path):
            return None, UnreadableFileWarning(f"Skipping vanished file: {file.path}")
        if not os.access(file.path, os.R_OK):
            return None, UnreadableFileWarning(f"Skipping unreadable file: {file.path}")
        try:
            return hasher.hash_file(file.path, config.checksum_mode), None
        except OSError as e:
            return None, UnreadableFileWarning(f"Skipping unreadable file: {file.path} ({e})")
        except FormatError as e:
            return None, e

    def _report(self, percent: Optional[int]) -> None:
        if percent is not None:
            self.sink.on_percent(percent)

    def _fail(self, error: Exception) -> None:
        self.state = RunState.FATAL
        if self.result is not None:
            self.result.state = self.state
            self.result.message = str(error)
        logger.error(str(error))
