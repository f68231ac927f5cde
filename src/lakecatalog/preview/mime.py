"""Extension-based MIME lookup and preview capability helpers."""

from __future__ import annotations

DEFAULT_MIME_TYPE = "application/octet-stream"

_MIME_TYPES = {
    "pdf": "application/pdf",
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "webp": "image/webp",
    "svg": "image/svg+xml",
    "txt": "text/plain",
    "json": "application/json",
    "csv": "text/csv",
}

IMAGE_EXTENSIONS = frozenset({"png", "jpg", "jpeg", "gif", "webp", "svg"})
PREVIEWABLE_EXTENSIONS = IMAGE_EXTENSIONS | {"pdf"}


def file_extension(name: str) -> str:
    """Return the lowercase text after the last dot, or ``""`` when absent."""
    return name.rsplit(".", 1)[-1].lower() if "." in name else ""


def mime_type_for(name: str) -> str:
    """Return the MIME type for ``name``, defaulting to generic binary."""
    return _MIME_TYPES.get(file_extension(name), DEFAULT_MIME_TYPE)


def is_previewable(name: str) -> bool:
    return file_extension(name) in PREVIEWABLE_EXTENSIONS


def is_image(name: str) -> bool:
    return file_extension(name) in IMAGE_EXTENSIONS


def is_pdf(name: str) -> bool:
    return file_extension(name) == "pdf"


__all__ = [
    "DEFAULT_MIME_TYPE",
    "IMAGE_EXTENSIONS",
    "PREVIEWABLE_EXTENSIONS",
    "file_extension",
    "mime_type_for",
    "is_previewable",
    "is_image",
    "is_pdf",
]
