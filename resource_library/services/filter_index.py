"""Client-side style filtering of the catalog.

Filtering is a pure read: it never mutates the catalog and can be re-run on
every keystroke.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from resource_library.services.catalog import ResourceRecord

# Value of the unconstrained "all categories" option.
ALL_CATEGORIES = ""

NO_MATCHES_MESSAGE = "No matching resources."


@dataclass(frozen=True)
class FilterCriteria:
    """Free-text query plus an optional exact category constraint."""

    query: str = ""
    category: str = ALL_CATEGORIES

    def matches(self, record: ResourceRecord) -> bool:
        term = self.query.strip().lower()
        matches_search = (
            not term or term in record.name.lower() or term in record.path.lower()
        )
        matches_category = not self.category or record.category == self.category
        return matches_search and matches_category


@dataclass(frozen=True)
class FilterResult:
    """Visible records for one set of criteria."""

    records: list[ResourceRecord]
    total: int

    @property
    def empty(self) -> bool:
        return not self.records


def apply_filter(
    catalog: Sequence[ResourceRecord], criteria: FilterCriteria
) -> list[ResourceRecord]:
    """Return the records matching *criteria*, preserving catalog order."""
    return [record for record in catalog if criteria.matches(record)]


def filter_catalog(
    catalog: Sequence[ResourceRecord], criteria: FilterCriteria
) -> FilterResult:
    return FilterResult(records=apply_filter(catalog, criteria), total=len(catalog))


def category_options(catalog: Iterable[ResourceRecord]) -> list[str]:
    """Return the selector options: the "all" option followed by sorted categories."""
    categories = {record.category for record in catalog if record.category}
    return [ALL_CATEGORIES, *sorted(categories)]
