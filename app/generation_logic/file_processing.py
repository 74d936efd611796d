"""Stages multipart uploads in scratch storage.

Only form parts whose field name starts with ``file-`` and whose value is a
file are kept; everything else in the form is ignored. A file type the
extractor cannot read rejects the whole upload before anything is written.
"""

import logging

from starlette.datastructures import FormData
from starlette.datastructures import UploadFile

from app.core.exceptions import UnsupportedFileTypeError
from app.services.extractor import SUPPORTED_EXTENSIONS
from app.services.extractor import is_supported
from app.services.storage.temp_store import TempFileStore

__all__ = [
    "FILE_FIELD_PREFIX",
    "_stage_uploaded_files",
]

logger = logging.getLogger(__name__)

FILE_FIELD_PREFIX = "file-"


async def _stage_uploaded_files(form: FormData, store: TempFileStore, request_id: str) -> list[str]:
    """Write every ``file-*`` part to the store and return the generated filenames."""
    parts = [
        value
        for key, value in form.multi_items()
        if key.startswith(FILE_FIELD_PREFIX) and isinstance(value, UploadFile)
    ]
    for value in parts:
        if not is_supported(value.filename or ""):
            logger.warning("[%s] Rejecting unsupported upload %s", request_id, value.filename)
            raise UnsupportedFileTypeError(
                f"Unsupported file type: {value.filename}",
                {"supported": sorted(SUPPORTED_EXTENSIONS)},
            )

    uploaded_files: list[str] = []
    for value in parts:
        contents = await value.read()
        filename = store.store(value.filename or "", contents)
        logger.debug("[%s] Staged %s (%d bytes) as %s", request_id, value.filename, len(contents), filename)
        uploaded_files.append(filename)

    logger.info("[%s] Files uploaded: %s", request_id, uploaded_files)
    return uploaded_files
