from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv

from .catalog import Catalog
from .errors import ConfigError

load_dotenv()

DEFAULT_MAX_CONTENT_CHARS = 5000


def _parse_int(value: str | None, default: int) -> int:
    try:
        return int(value) if value is not None else default
    except ValueError:
        return default


def _parse_optional(value: str | None) -> Optional[str]:
    if value is None or not value.strip():
        return None
    return value.strip()


@dataclass
class Settings:
    content_root: Path
    catalog_path: Path
    index_path: Path
    agents_dir: Path
    api_url: str
    api_token: Optional[str] = None
    max_content_chars: int = DEFAULT_MAX_CONTENT_CHARS
    record_suffix: str = ".yaml"
    normalized_suffix: str = ".md"


def load_settings() -> Settings:
    max_chars = _parse_int(os.getenv("DOCCATALOG_MAX_CONTENT_CHARS"), DEFAULT_MAX_CONTENT_CHARS)
    if max_chars <= 0:
        max_chars = DEFAULT_MAX_CONTENT_CHARS
    return Settings(
        content_root=Path(os.getenv("DOCCATALOG_CONTENT_ROOT", ".")),
        catalog_path=Path(os.getenv("DOCCATALOG_CATALOG", "catalog.yaml")),
        index_path=Path(os.getenv("DOCCATALOG_INDEX_PATH", "search_index.json")),
        agents_dir=Path(os.getenv("DOCCATALOG_AGENTS_DIR", "agents")),
        api_url=os.getenv("DOCCATALOG_API_URL", "http://localhost:8080"),
        api_token=_parse_optional(os.getenv("DOCCATALOG_API_TOKEN")),
        max_content_chars=max_chars,
    )


def load_catalog(path: Path) -> Catalog:
    """Read a YAML (or JSON) catalog file into an immutable :class:`Catalog`."""

    if not path.exists():
        raise ConfigError(f"Catalog file not found: {path}")
    try:
        with path.open("r", encoding="utf-8") as handle:
            raw: Any = yaml.safe_load(handle)
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Catalog file could not be read: {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Catalog file is not valid YAML/JSON: {path}: {exc}") from exc
    if raw is None:
        raise ConfigError(f"Catalog file is empty: {path}")
    return Catalog.from_mapping(raw)
