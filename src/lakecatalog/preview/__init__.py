"""Preview support: MIME lookup and releasable binary resources."""

from .mime import is_image, is_pdf, is_previewable, mime_type_for
from .resources import ResourceError, ResourceHandle, ResourceRegistry

__all__ = [
    "is_image",
    "is_pdf",
    "is_previewable",
    "mime_type_for",
    "ResourceError",
    "ResourceHandle",
    "ResourceRegistry",
]
