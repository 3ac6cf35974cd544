"""
Immutable catalog of documentation artifacts.

The catalog maps a category name to an ordered list of entries. Declaration
order is significant: the search index is emitted in exactly that order, so the
catalog keeps categories and entries as tuples instead of re-sorting them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Mapping, Tuple

from .errors import CatalogError


@dataclass(frozen=True)
class CatalogEntry:
    display_name: str
    relative_path: str

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.display_name, "path": self.relative_path}


def _parse_entry(category: str, position: int, item: Any) -> CatalogEntry:
    if not isinstance(item, Mapping):
        raise CatalogError(f"Entry {position} in category '{category}' must be a mapping with name/path")
    name = item.get("name")
    path = item.get("path")
    if not isinstance(name, str) or not name.strip():
        raise CatalogError(f"Entry {position} in category '{category}' is missing a name")
    if not isinstance(path, str) or not path.strip():
        raise CatalogError(f"Entry {position} in category '{category}' is missing a path")
    return CatalogEntry(display_name=name.strip(), relative_path=path.strip())


@dataclass(frozen=True)
class Catalog:
    sections: Tuple[Tuple[str, Tuple[CatalogEntry, ...]], ...] = ()

    @classmethod
    def from_mapping(cls, raw: Any) -> "Catalog":
        """Validate ``{category: [{name, path}, ...]}`` and freeze it."""

        if not isinstance(raw, Mapping):
            raise CatalogError("Catalog must be a mapping of category -> list of entries")
        sections: List[Tuple[str, Tuple[CatalogEntry, ...]]] = []
        for category, items in raw.items():
            if not isinstance(category, str) or not category.strip():
                raise CatalogError(f"Catalog category names must be non-empty strings, got {category!r}")
            if items is None:
                items = []
            if not isinstance(items, list):
                raise CatalogError(f"Category '{category}' must hold a list of entries")
            entries = tuple(_parse_entry(category, idx, item) for idx, item in enumerate(items))
            sections.append((category, entries))
        return cls(sections=tuple(sections))

    @property
    def categories(self) -> List[str]:
        return [category for category, _ in self.sections]

    def entries(self, category: str) -> Tuple[CatalogEntry, ...]:
        for name, entries in self.sections:
            if name == category:
                return entries
        raise KeyError(category)

    def __iter__(self) -> Iterator[Tuple[str, CatalogEntry]]:
        for category, entries in self.sections:
            for entry in entries:
                yield category, entry

    def __len__(self) -> int:
        return sum(len(entries) for _, entries in self.sections)

    def to_mapping(self) -> Dict[str, List[Dict[str, str]]]:
        return {category: [entry.to_dict() for entry in entries] for category, entries in self.sections}
