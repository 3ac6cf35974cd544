from __future__ import annotations

from pathlib import Path
from typing import Optional


class DocCatalogError(Exception):
    """Base class for every error raised by doccatalog."""


class ConfigError(DocCatalogError, ValueError):
    """Raised when settings or the catalog file are invalid."""


class CatalogError(ConfigError):
    """Raised when the catalog mapping has the wrong shape."""


class IndexWriteError(DocCatalogError):
    """Raised when the search index artifact cannot be written."""


class ConversionError(DocCatalogError):
    """Raised when an agent record cannot be converted or its source cannot be removed."""

    def __init__(self, message: str, path: Optional[Path] = None) -> None:
        super().__init__(message)
        self.path = path


class ApiError(DocCatalogError):
    """Raised when the version endpoint cannot be queried."""
