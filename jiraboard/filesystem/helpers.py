"""Naming, MIME detection and validation shared by the storage backends."""

from __future__ import annotations

import uuid

from jiraboard.filesystem.storage import UploadOptions
from jiraboard.utils.errors import ClientError
from jiraboard.utils.timestamp import now

_MIME_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".pdf": "application/pdf",
    ".doc": "application/msword",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ".txt": "text/plain",
    ".csv": "text/csv",
    ".zip": "application/zip",
}
_DEFAULT_MIME = "application/octet-stream"


def _extension(name: str) -> str:
    base = name.replace("\\", "/").rsplit("/", 1)[-1]
    dot = base.rfind(".")
    return base[dot:] if dot >= 0 else ""


def generate_filename(original: str) -> str:
    """Return a unique name ``YYYYMMDD_HHMMSS_<8 hex>`` keeping the extension."""
    stamp = now().strftime("%Y%m%d_%H%M%S")
    return f"{stamp}_{str(uuid.uuid4())[:8]}{_extension(original)}"


def detect_mime_type(filename: str) -> str:
    """Guess a MIME type from the file extension."""
    return _MIME_TYPES.get(_extension(filename).lower(), _DEFAULT_MIME)


def convert_to_mb(size: int) -> float:
    """Convert bytes to megabytes."""
    return size / (1024 * 1024)


def validate_upload(file_size: int, mime_type: str, opts: UploadOptions) -> None:
    """Raise :class:`ClientError` (400) if the file breaks the size or type limits."""
    if opts.max_size > 0 and file_size > opts.max_size:
        limit = convert_to_mb(opts.max_size) - 1
        raise ClientError(400, f"Ukuran file melebihi batas maksimum {limit:.0f}mb")
    allowed = list(opts.allowed_mime_types)
    if allowed and mime_type not in allowed:
        raise ClientError(400, f"mime type {mime_type} is not allowed")