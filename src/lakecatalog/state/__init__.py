"""Observable state for a catalog browsing session."""

from .models import CatalogViewState, PreviewState, PreviewStatus

__all__ = ["CatalogViewState", "PreviewState", "PreviewStatus"]
