"""
File Upload Utility

1. Pass-through storage: save an uploaded file under UPLOAD_DIR and
   return its public URL (served at /uploads).
2. Resume text extraction for mock interviews:
   - PDF (.pdf) using PyPDF2
   - Word (.docx) using python-docx
   - Plain Text (.txt)

Max file size: MAX_UPLOAD_MB (default 5MB)
"""

import io
import re
import time
import zipfile
from pathlib import Path
from typing import Tuple

from docx import Document
from docx.opc.exceptions import PackageNotFoundError
from fastapi import UploadFile, HTTPException
from fastapi.concurrency import run_in_threadpool
from loguru import logger
from PyPDF2 import PdfReader
from PyPDF2.errors import PdfReadError

from hireflow.core.config import get_settings

RESUME_EXTENSIONS = {'.pdf', '.docx', '.txt'}


def get_file_extension(filename: str) -> str:
    """Get lowercase file extension."""
    if '.' not in filename:
        return ''
    return '.' + filename.rsplit('.', 1)[1].lower()


def safe_filename(filename: str) -> str:
    """Strip directories and characters that are unsafe in a URL path."""
    name = Path(filename).name
    name = re.sub(r"[^A-Za-z0-9._-]+", "_", name).strip("._")
    return name or "file"


async def read_upload(file: UploadFile) -> bytes:
    """Read an upload, enforcing presence and the size limit."""
    settings = get_settings()
    if file is None or not file.filename:
        raise HTTPException(status_code=400, detail="No file uploaded.")

    content = await file.read()
    if not content:
        raise HTTPException(status_code=400, detail="Uploaded file is empty.")
    if len(content) > settings.max_upload_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"File too large. Maximum size: {settings.max_upload_mb}MB"
        )
    return content


async def save_upload(file: UploadFile) -> str:
    """
    Store the file as `<ms-timestamp>-<name>` and return its public URL.
    """
    settings = get_settings()
    content = await read_upload(file)

    upload_dir = Path(settings.upload_dir)
    upload_dir.mkdir(parents=True, exist_ok=True)

    stored_name = f"{int(time.time() * 1000)}-{safe_filename(file.filename)}"
    await run_in_threadpool((upload_dir / stored_name).write_bytes, content)
    logger.info(f"Stored upload {stored_name} ({len(content)} bytes)")

    return f"{settings.public_base_url.rstrip('/')}/uploads/{stored_name}"


async def extract_text_from_file(file: UploadFile) -> Tuple[str, str]:
    """
    Extract text from an uploaded resume.

    Returns:
        Tuple of (extracted_text, filename)

    Raises:
        HTTPException on validation/extraction errors
    """
    if not file.filename:
        raise HTTPException(status_code=400, detail="No filename provided")

    ext = get_file_extension(file.filename)
    if ext not in RESUME_EXTENSIONS:
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported file type '{ext}'. Allowed: PDF, DOCX, TXT"
        )

    content = await read_upload(file)

    if ext == '.pdf':
        text = await run_in_threadpool(extract_from_pdf, content)
    elif ext == '.docx':
        text = await run_in_threadpool(extract_from_docx, content)
    else:  # .txt
        text = extract_from_txt(content)

    if not text.strip():
        raise HTTPException(
            status_code=400,
            detail="Could not extract text from file. File may be empty or corrupted."
        )

    return text, file.filename


def extract_from_pdf(content: bytes) -> str:
    """Extract text from PDF bytes."""
    try:
        reader = PdfReader(io.BytesIO(content))
        text_parts = []
        for page in reader.pages:
            page_text = page.extract_text()
            if page_text:
                text_parts.append(page_text)
        return '\n'.join(text_parts)
    except (PdfReadError, ValueError) as e:
        raise HTTPException(status_code=400, detail=f"Error reading PDF: {str(e)}")


def extract_from_docx(content: bytes) -> str:
    """Extract text from DOCX bytes."""
    try:
        doc = Document(io.BytesIO(content))
    except (PackageNotFoundError, zipfile.BadZipFile, KeyError, ValueError) as e:
        raise HTTPException(status_code=400, detail=f"Error reading DOCX: {str(e)}")

    text_parts = []

    for para in doc.paragraphs:
        if para.text.strip():
            text_parts.append(para.text)

    for table in doc.tables:
        for row in table.rows:
            row_text = [cell.text.strip() for cell in row.cells if cell.text.strip()]
            if row_text:
                text_parts.append(' | '.join(row_text))

    return '\n'.join(text_parts)


def extract_from_txt(content: bytes) -> str:
    """Extract text from TXT bytes."""
    for encoding in ['utf-8', 'cp1252']:
        try:
            return content.decode(encoding)
        except UnicodeDecodeError:
            continue
    return content.decode('latin-1')
