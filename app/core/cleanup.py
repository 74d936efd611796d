import logging
import pathlib
import time

from app.core.config import settings

logger = logging.getLogger(__name__)


def cleanup_scratch(tmp_dir: str | pathlib.Path | None = None) -> int:
    """Remove scratch files older than cleanup_ttl. Returns how many were removed.

    Catches uploads whose generation request never arrived.
    """
    scratch = pathlib.Path(tmp_dir) if tmp_dir is not None else settings.temp_dir
    removed = 0
    for item in scratch.glob("*"):
        try:
            if not item.is_file():
                continue
            if time.time() - item.stat().st_mtime > settings.cleanup_ttl:
                logger.info(f"Attempting to remove stale upload: {item}")
                item.unlink()
                removed += 1
                logger.info(f"Successfully removed stale upload: {item}")
        except FileNotFoundError:
            logger.warning(f"Item not found during cleanup (possibly already deleted): {item}")
        except OSError as e:
            logger.error(f"Error removing item {item}: {e}")
    return removed
