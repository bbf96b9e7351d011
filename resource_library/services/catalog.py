"""Catalog records, entry normalization and the in-memory catalog store."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

# The contents API says "file"/"dir"; the Git tree API says "blob"/"tree".
_CONTENTS_TYPES = {"file": "blob", "dir": "tree"}


@dataclass(frozen=True)
class TreeEntry:
    """A raw path discovered by a tree enumerator."""

    path: str
    type: str
    category_hint: str = ""

    @classmethod
    def from_api(cls, item: dict, category_hint: str = "") -> TreeEntry:
        """Build an entry from a Git tree or contents API item."""
        raw_type = item.get("type", "")
        return cls(
            path=item.get("path", ""),
            type=_CONTENTS_TYPES.get(raw_type, raw_type),
            category_hint=category_hint,
        )

    @property
    def is_file(self) -> bool:
        return self.type == "blob"

    @property
    def is_dir(self) -> bool:
        return self.type == "tree"


@dataclass(frozen=True)
class ResourceRecord:
    """A file in the catalog.

    ``category`` is always derived from ``path`` (or the listing hint) by
    ``normalize``; records are never built with an independent category.
    """

    path: str
    name: str
    category: str


def derive_category(path: str, category_hint: str = "") -> str:
    if category_hint:
        return category_hint
    if "/" in path:
        return path.split("/", maxsplit=1)[0]
    return ""


def normalize(entries: Iterable[TreeEntry], category_hint: str = "") -> list[ResourceRecord]:
    """Convert enumerated entries into catalog records.

    Non-file entries and entries without a path are dropped.  The category is
    the explicit *category_hint* when given, else the entry's own hint, else
    the first path segment (empty for files at the repository root).
    """
    records: list[ResourceRecord] = []
    for entry in entries:
        if not entry.is_file or not entry.path:
            continue
        records.append(
            ResourceRecord(
                path=entry.path,
                name=entry.path.rsplit("/", maxsplit=1)[-1],
                category=derive_category(entry.path, category_hint or entry.category_hint),
            )
        )
    return records


class CatalogStore:
    """Holds the latest successfully built catalog.

    Each ``replace`` swaps the whole catalog; nothing is merged from earlier
    builds.
    """

    def __init__(self) -> None:
        self._records: tuple[ResourceRecord, ...] = ()
        self.built_at: datetime | None = None

    def replace(self, records: Iterable[ResourceRecord]) -> None:
        self._records = tuple(records)
        self.built_at = datetime.now(UTC)

    def current(self) -> tuple[ResourceRecord, ...]:
        return self._records

    def __len__(self) -> int:
        return len(self._records)
