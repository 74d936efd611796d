import io

import pytest
from docx import Document

from app.services.extractor import ExtractorError
from app.services.extractor import extract


@pytest.mark.asyncio
async def test_extract_plain_text(temp_store):
    name = temp_store.store("notes.md", "# Photosynthesis\nLight → sugar".encode())

    text = await extract(temp_store.record(name), "test-extract")

    assert text == "# Photosynthesis\nLight → sugar"


@pytest.mark.asyncio
async def test_extract_docx(temp_store):
    doc = Document()
    doc.add_paragraph("First paragraph")
    doc.add_paragraph("Second paragraph")
    buffer = io.BytesIO()
    doc.save(buffer)
    name = temp_store.store("notes.docx", buffer.getvalue())

    text = await extract(temp_store.record(name), "test-extract")

    assert "First paragraph\nSecond paragraph" in text


@pytest.mark.asyncio
async def test_extract_pdf_uses_pdfplumber(temp_store, monkeypatch):
    monkeypatch.setattr("app.services.extractor._pdf_to_text", lambda data: "pdf text")
    name = temp_store.store("notes.pdf", b"%PDF-1.4\n")

    assert await extract(temp_store.record(name), "test-extract") == "pdf text"


@pytest.mark.asyncio
async def test_extract_corrupt_pdf_raises(temp_store):
    name = temp_store.store("broken.pdf", b"not a pdf at all")

    with pytest.raises(ExtractorError):
        await extract(temp_store.record(name), "test-extract")


@pytest.mark.asyncio
async def test_extract_unsupported_extension(temp_store):
    name = temp_store.store("photo.png", b"\x89PNG")

    with pytest.raises(ExtractorError, match="Unsupported file type"):
        await extract(temp_store.record(name), "test-extract")
