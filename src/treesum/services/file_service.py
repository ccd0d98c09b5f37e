"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/file_service.py
File operations on manifests outside the engine's append-only writes.
Stale manifests are moved to the system trash, never permanently erased.
"""
import logging
from pathlib import Path
from send2trash import send2trash

logger = logging.getLogger(__name__)


class FileService:
    """
    Cross-platform manifest housekeeping.
    Uses send2trash so cleared manifests can be restored from the trash.
    """

    @staticmethod
    def move_to_trash(manifest_path: str) -> None:
        """Moves a manifest to the system trash so the next write starts a fresh file."""
        path = Path(manifest_path).resolve()

        if not path.is_file():
            raise FileNotFoundError(f"Manifest not found: {path}")

        try:
            send2trash(str(path))
        except Exception as e:
            raise RuntimeError(f"Failed to move manifest to trash: {path} ({e})") from e
        logger.debug(f"Moved to trash: {path}")
