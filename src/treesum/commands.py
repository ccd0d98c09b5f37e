"""
Unified command orchestrator for manifest generation.
This is the SINGLE source of truth for wiring the engine — used by the CLI and by library callers.
"""
from typing import Optional
from treesum.core.models import RunConfig, RunResult
from treesum.core.interfaces import Hasher, ProgressSink
from treesum.core.engine import ManifestEngine
from treesum.core.hasher import ExternalToolHasher, HasherImpl, get_algorithm
from treesum.services.file_service import FileService


class ManifestCommand:
    """
    Orchestrates a manifest run:
    1. Pick the hasher (native algorithm or external digest tool)
    2. Build the engine with trash-based clearing of stale manifests
    3. Execute resolve -> discover -> process with progress reporting

    Usage:
        config = RunConfig.from_human_readable("/data/set", "/out", mode="per-directory", tag="v1")
        result = ManifestCommand().execute(config, sink=console_sink)
        print(result.summary)
    """

    def __init__(self, external_tool: Optional[str] = None):
        self.external_tool = external_tool
        self._engine: Optional[ManifestEngine] = None

    def build_hasher(self, config: RunConfig) -> Hasher:
        if self.external_tool:
            return ExternalToolHasher(self.external_tool)
        return HasherImpl(get_algorithm(config.algorithm))

    def execute(self, config: RunConfig, sink: Optional[ProgressSink] = None) -> RunResult:
        """
        Execute a run with the given configuration.

        Raises:
            UsageError, PathError: invalid paths, nothing was written
            NamingError: a manifest name could not be derived mid-run
        """
        self._engine = ManifestEngine(
            hasher=self.build_hasher(config),
            sink=sink,
            discard=FileService.move_to_trash
        )
        return self._engine.run(config)

    @property
    def engine(self) -> Optional[ManifestEngine]:
        """Engine of the last execution (state and partial result after a failure)."""
        return self._engine
