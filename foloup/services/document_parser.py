"""Text extraction from uploaded resumes and job descriptions."""

import asyncio
import logging
import re
import time
from pathlib import Path

import docx
import pdfplumber
from fastapi import UploadFile

logger = logging.getLogger(__name__)

# .doc passes the upload filter but cannot be parsed
ALLOWED_EXTENSIONS = {".pdf", ".doc", ".docx"}
PARSEABLE_EXTENSIONS = {".pdf", ".docx", ".txt"}


class FileTooLargeError(ValueError):
    """Upload exceeds the configured size limit."""


def is_allowed_file(filename: str | None, allowed: set[str] = ALLOWED_EXTENSIONS) -> bool:
    if not filename:
        return False
    return Path(filename).suffix.lower() in allowed


def storage_name(filename: str) -> str:
    """Unique on-disk name: whitespace in the base becomes ``_``, plus a millisecond stamp."""
    path = Path(filename)
    base = re.sub(r"\s+", "_", path.stem)
    return f"{base}_{int(time.time() * 1000)}{path.suffix}"


def _read_pdf(path: Path) -> str:
    text_parts = []
    with pdfplumber.open(str(path)) as pdf:
        for page in pdf.pages:
            page_text = page.extract_text()
            if page_text:
                text_parts.append(page_text)
    return "\n\n".join(text_parts)


def _read_docx(path: Path) -> str:
    document = docx.Document(str(path))
    lines = [p.text for p in document.paragraphs if p.text.strip()]
    for table in document.tables:
        for row in table.rows:
            cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
            if cells:
                lines.append(" | ".join(cells))
    return "\n".join(lines)


def parse_document(file_path: str | Path) -> str:
    """Extract plain text from a PDF, DOCX or TXT file."""
    path = Path(file_path)
    ext = path.suffix.lower()

    if ext not in PARSEABLE_EXTENSIONS:
        raise ValueError(f"Unsupported file type: {ext or '(none)'}")

    try:
        if ext == ".pdf":
            text = _read_pdf(path)
        elif ext == ".docx":
            text = _read_docx(path)
        else:
            text = path.read_text(encoding="utf-8")
    except Exception as e:
        logger.error(f"Error parsing file {path}: {e}")
        raise ValueError(f"Failed to parse file: {e}") from e

    logger.debug(f"Extracted {len(text)} characters from {path.name}")
    return text


async def parse_document_async(file_path: str | Path) -> str:
    """Run ``parse_document`` off the event loop."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, parse_document, file_path)


async def save_upload(
    upload: UploadFile,
    directory: Path,
    max_size: int,
    filename: str | None = None,
) -> tuple[Path, int]:
    """Persist an upload to ``directory`` and return its path and size.

    Raises ``FileTooLargeError`` when the file exceeds ``max_size`` bytes.
    """
    content = await upload.read()
    if len(content) > max_size:
        raise FileTooLargeError(
            f"File size exceeds maximum allowed size of {max_size} bytes")

    directory.mkdir(parents=True, exist_ok=True)
    file_path = directory / (filename or storage_name(upload.filename or "upload"))
    file_path.write_bytes(content)
    return file_path, len(content)
