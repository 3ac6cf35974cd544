from __future__ import annotations

import json
import logging
import os
import tempfile
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from .catalog import Catalog, CatalogEntry
from .errors import IndexWriteError
from .fileio import match_target_mode
from .text_clean import strip_markup, truncate

LOGGER = logging.getLogger(__name__)

MAX_CONTENT_CHARS = 5000
TEXT_EXTENSIONS = frozenset({".md", ".txt", ".sh"})

SKIP_OUTSIDE_ROOT = "outside content root"
SKIP_MISSING = "missing"
SKIP_NOT_A_FILE = "not a file"
SKIP_UNSUPPORTED = "unsupported extension"
SKIP_READ_ERROR = "read error"


@dataclass(frozen=True)
class IndexEntry:
    title: str
    category: str
    path: str
    content: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


@dataclass(frozen=True)
class SkippedEntry:
    category: str
    path: str
    reason: str
    detail: str = ""


@dataclass
class IndexBuildReport:
    entries: List[IndexEntry] = field(default_factory=list)
    skipped: List[SkippedEntry] = field(default_factory=list)
    written_to: Optional[Path] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def is_text_artifact(path: Path) -> bool:
    return path.suffix.lower() in TEXT_EXTENSIONS


def _resolve_under_root(content_root: Path, relative_path: str) -> Optional[Path]:
    # lexical check only; symlinks inside the root may point anywhere
    if os.path.isabs(relative_path):
        return None
    normalized = os.path.normpath(relative_path)
    if normalized == os.pardir or normalized.startswith(os.pardir + os.sep):
        return None
    return content_root / normalized


def index_entry_for(
    category: str,
    entry: CatalogEntry,
    content_root: Path,
    max_chars: int = MAX_CONTENT_CHARS,
) -> IndexEntry | SkippedEntry:
    """Load one catalog entry; returns a SkippedEntry instead of raising on per-item problems."""

    try:
        path = _resolve_under_root(content_root, entry.relative_path)
        if path is None:
            LOGGER.warning("Catalog path escapes content root, skipping: %s", entry.relative_path)
            return SkippedEntry(category, entry.relative_path, SKIP_OUTSIDE_ROOT)
        if not path.exists():
            LOGGER.debug("Catalog entry not found on disk: %s", entry.relative_path)
            return SkippedEntry(category, entry.relative_path, SKIP_MISSING)
        if not path.is_file():
            LOGGER.debug("Catalog entry is not a regular file: %s", entry.relative_path)
            return SkippedEntry(category, entry.relative_path, SKIP_NOT_A_FILE)
        if not is_text_artifact(Path(entry.relative_path)):
            LOGGER.debug("Catalog entry has unsupported extension: %s", entry.relative_path)
            return SkippedEntry(category, entry.relative_path, SKIP_UNSUPPORTED)
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        LOGGER.warning("Error processing %s: %s", entry.relative_path, exc)
        return SkippedEntry(category, entry.relative_path, SKIP_READ_ERROR, str(exc))

    content = truncate(strip_markup(raw), max_chars)
    return IndexEntry(
        title=entry.display_name,
        category=category,
        path=entry.relative_path,
        content=content,
    )


def build_index(
    catalog: Catalog,
    content_root: Path,
    max_chars: int = MAX_CONTENT_CHARS,
) -> IndexBuildReport:
    report = IndexBuildReport()
    for category, entry in catalog:
        result = index_entry_for(category, entry, content_root, max_chars=max_chars)
        if isinstance(result, SkippedEntry):
            report.skipped.append(result)
        else:
            report.entries.append(result)
    return report


def serialize_index(entries: Iterable[IndexEntry]) -> str:
    payload: List[Dict[str, Any]] = [entry.to_dict() for entry in entries]
    return json.dumps(payload, indent=2, ensure_ascii=False)


def write_index(entries: Iterable[IndexEntry], output_path: Path) -> Path:
    """Replace ``output_path`` with the serialized index via a temp file + ``os.replace``."""

    data = serialize_index(entries)
    tmp_name: Optional[str] = None
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{output_path.name}.", suffix=".tmp", dir=str(output_path.parent)
        )
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(data)
        match_target_mode(tmp_name, output_path)
        os.replace(tmp_name, output_path)
    except OSError as exc:
        if tmp_name and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise IndexWriteError(f"Failed to write search index {output_path}: {exc}") from exc
    return output_path


def run_index_build(
    catalog: Catalog,
    content_root: Path,
    output_path: Path,
    max_chars: int = MAX_CONTENT_CHARS,
) -> IndexBuildReport:
    LOGGER.info("Building search index from %d catalog entries", len(catalog))
    report = build_index(catalog, content_root, max_chars=max_chars)
    try:
        report.written_to = write_index(report.entries, output_path)
    except IndexWriteError as exc:
        LOGGER.error(str(exc))
        report.error = str(exc)
        return report
    LOGGER.info(
        "Search index generated at %s containing %d items (%d skipped).",
        output_path,
        len(report.entries),
        len(report.skipped),
    )
    return report
