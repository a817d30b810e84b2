"""Locator helpers and PDF loading."""

from __future__ import annotations

import re
from pathlib import Path, PurePosixPath

import fitz  # pymupdf

from docsplit.core.errors import SourceLoadFailure

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")

_MIME_MAP = {
    ".pdf": "application/pdf",
    ".json": "application/json",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".tiff": "image/tiff",
}


def source_dir(locator: str) -> str:
    """Everything before the last ``/`` of a storage locator ("" at top level)."""
    head, _, _ = locator.rpartition("/")
    return head


def source_file_name(locator: str) -> str:
    return locator.rpartition("/")[2]


def join_locator(*parts: str) -> str:
    """Join locator segments with ``/``, dropping empty ones."""
    return "/".join(p.strip("/") for p in parts if p and p.strip("/"))


def safe_file_stem(name: str) -> str:
    """Make a doc type usable as a file name."""
    s = _UNSAFE_CHARS.sub("_", name).strip("_")
    return s or "document"


def get_file_extension(file_path: str | Path) -> str:
    """Get normalized file extension."""
    return PurePosixPath(str(file_path)).suffix.lower()


def is_pdf(file_path: str | Path) -> bool:
    """Check if a file is a PDF."""
    return get_file_extension(file_path) == ".pdf"


def get_mime_type(file_path: str | Path) -> str:
    return _MIME_MAP.get(get_file_extension(file_path), "application/octet-stream")


def open_pdf(data: bytes) -> fitz.Document:
    """Open PDF bytes, raising SourceLoadFailure for anything unreadable."""
    try:
        doc = fitz.open(stream=data, filetype="pdf")
    except Exception as exc:
        raise SourceLoadFailure(f"Could not load source PDF: {exc}") from exc
    if doc.page_count == 0:
        doc.close()
        raise SourceLoadFailure("Source PDF has no pages")
    return doc


def save_pdf(doc: fitz.Document) -> bytes:
    return doc.tobytes(garbage=3, deflate=True)
