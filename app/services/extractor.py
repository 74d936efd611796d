import asyncio
import io
import logging
from pathlib import Path

import pdfplumber
from docx import Document

from app.models.question_models import UploadedFileRecord

# Configure module logger
logger = logging.getLogger(__name__)

TEXT_EXTENSIONS = {".txt", ".md", ".markdown", ".csv", ".json", ".html", ".htm"}
SUPPORTED_EXTENSIONS = {".pdf", ".docx", *TEXT_EXTENSIONS}


class ExtractorError(Exception):
    """Base exception for extraction-related errors"""


def is_supported(filename: str) -> bool:
    return Path(filename).suffix.lower() in SUPPORTED_EXTENSIONS


def _pdf_to_text(data: bytes) -> str:
    with pdfplumber.open(io.BytesIO(data)) as pdf:
        page_texts = [text for p in pdf.pages if (text := p.extract_text()) is not None]
    return "\n".join(page_texts)


def _docx_to_text(data: bytes) -> str:
    doc = Document(io.BytesIO(data))
    return "\n".join(p.text for p in doc.paragraphs)


def _plain_to_text(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


async def extract(record: UploadedFileRecord, request_id: str) -> str:
    """Return the plain text of a staged upload."""
    path = Path(record.path)
    ext = path.suffix.lower()
    if ext == ".pdf":
        handler = _pdf_to_text
    elif ext == ".docx":
        handler = _docx_to_text
    elif ext in TEXT_EXTENSIONS:
        handler = _plain_to_text
    else:
        logger.warning("[%s] Unsupported file type %s for %s", request_id, ext, record.filename)
        raise ExtractorError(f"Unsupported file type: {ext or record.filename}")

    try:
        data = await asyncio.to_thread(path.read_bytes)
        text = await asyncio.to_thread(handler, data)
    except Exception as e:
        logger.error("[%s] Failed to extract text from %s: %s", request_id, record.filename, str(e), exc_info=True)
        raise ExtractorError(f"Failed to extract text from {record.filename}") from e

    logger.debug("[%s] Extracted %d chars from %s", request_id, len(text), record.filename)
    return text
