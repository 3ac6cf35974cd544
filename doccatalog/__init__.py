"""
Documentation catalog tooling: search index builder and agent record normalizer.
"""

from .agent_records import (  # noqa: F401
    ConversionReport,
    ConvertedRecord,
    RecordField,
    ScannedRecord,
    convert_directory,
    convert_record_file,
    normalize_record_text,
    render_record,
    scan_record,
)
from .api_client import ApiClient  # noqa: F401
from .catalog import Catalog, CatalogEntry  # noqa: F401
from .config import Settings, load_catalog, load_settings  # noqa: F401
from .errors import (  # noqa: F401
    ApiError,
    CatalogError,
    ConfigError,
    ConversionError,
    DocCatalogError,
    IndexWriteError,
)
from .indexer import (  # noqa: F401
    MAX_CONTENT_CHARS,
    IndexBuildReport,
    IndexEntry,
    SkippedEntry,
    build_index,
    run_index_build,
    write_index,
)
from .text_clean import strip_markup, truncate  # noqa: F401

__version__ = "0.1.0"

__all__ = [
    "ApiClient",
    "ApiError",
    "Catalog",
    "CatalogEntry",
    "CatalogError",
    "ConfigError",
    "ConversionError",
    "ConversionReport",
    "ConvertedRecord",
    "DocCatalogError",
    "IndexBuildReport",
    "IndexEntry",
    "IndexWriteError",
    "MAX_CONTENT_CHARS",
    "RecordField",
    "ScannedRecord",
    "Settings",
    "SkippedEntry",
    "build_index",
    "convert_directory",
    "convert_record_file",
    "load_catalog",
    "load_settings",
    "normalize_record_text",
    "render_record",
    "run_index_build",
    "scan_record",
    "strip_markup",
    "truncate",
    "write_index",
]
