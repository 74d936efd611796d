"""Scratch-directory storage for uploads awaiting a generation request.

Files are kept under ``<epoch millis><original extension>`` names so the
client only ever has to echo back an opaque filename.
"""

import logging
import time
from collections.abc import Iterable
from pathlib import Path

from app.core.config import settings
from app.models.question_models import UploadedFileRecord

logger = logging.getLogger(__name__)


class TempFileStore:
    """Stages uploaded payloads in a scratch directory and removes them after use."""

    def __init__(self, root: Path | str):
        self.root = Path(root)

    def _ensure_root(self) -> None:
        if not self.root.exists():
            logger.info("Creating scratch directory: %s", self.root)
            self.root.mkdir(parents=True, exist_ok=True)

    def _generate_filename(self, original_name: str) -> str:
        ext = Path(original_name).suffix
        millis = time.time_ns() // 1_000_000
        # Files of one upload can land in the same millisecond
        while (self.root / f"{millis}{ext}").exists():
            millis += 1
        return f"{millis}{ext}"

    def record(self, filename: str) -> UploadedFileRecord:
        return UploadedFileRecord(filename=filename, path=str(self.path_for(filename)))

    def path_for(self, filename: str) -> Path:
        # Only the final path component is honoured; clients cannot leave the scratch dir
        return self.root / Path(filename).name

    def store(self, original_name: str, data: bytes) -> str:
        """Write ``data`` under a fresh timestamp-based name and return that name.

        Filesystem errors propagate to the caller.
        """
        self._ensure_root()
        filename = self._generate_filename(original_name)
        self.path_for(filename).write_bytes(data)
        logger.debug("Stored upload %s as %s (%d bytes)", original_name, filename, len(data))
        return filename

    def exists(self, filename: str) -> bool:
        return self.path_for(filename).is_file()

    def existing(self, filenames: Iterable[str]) -> list[str]:
        """Return the subset of ``filenames`` present on disk, in the given order."""
        return [name for name in filenames if self.exists(name)]

    def read_bytes(self, filename: str) -> bytes:
        return self.path_for(filename).read_bytes()

    def remove(self, filename: str) -> None:
        """Delete ``filename`` if present. Failures are logged, never raised."""
        file_path = self.path_for(filename)
        try:
            if file_path.exists():
                file_path.unlink()
                logger.info("Deleted processed file: %s", filename)
        except OSError as e:
            logger.error("Error deleting file %s: %s", filename, e)

    def remove_many(self, filenames: Iterable[str]) -> None:
        for filename in filenames:
            self.remove(filename)


def get_temp_store() -> TempFileStore:
    """FastAPI dependency providing the configured scratch store."""
    return TempFileStore(settings.temp_dir)
