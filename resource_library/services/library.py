"""Resource library orchestration.

Wires branch resolution, tree enumeration, normalization and the catalog
store together behind the operations the HTTP layer uses: ``rebuild`` for a
full reload and ``apply_filter`` / ``categories`` for cheap reads of the
current catalog.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

import httpx
import structlog

from resource_library.services.branch_resolver import FALLBACK_BRANCH, BranchResolver
from resource_library.services.catalog import CatalogStore, ResourceRecord, normalize
from resource_library.services.enumerator import CategoryFailure, build_enumerator
from resource_library.services.errors import CatalogError, ErrorKind
from resource_library.services.filter_index import (
    FilterCriteria,
    FilterResult,
    category_options,
    filter_catalog,
)
from resource_library.services.github_client import GITHUB_API_URL
from resource_library.services.links import (
    DEFAULT_RAW_URL,
    DEFAULT_WEB_URL,
    LinkBuilder,
    email_template,
    share_text,
)

if TYPE_CHECKING:
    from resource_library.config import Settings

logger = structlog.get_logger()


class LibraryStatus(StrEnum):
    """Lifecycle of the catalog as seen by callers."""

    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


@dataclass(frozen=True)
class ResourceLinks:
    """Everything rendering needs to link, share or email one resource."""

    view_url: str
    download_url: str
    download_label: str
    share_text: str
    email_subject: str
    email_body: str


@dataclass
class RebuildReport:
    """Outcome of a successful (possibly partial) rebuild."""

    branch: str
    strategy: str
    records: int
    failures: list[CategoryFailure] = field(default_factory=list)
    truncated: bool = False
    skipped_directories: int = 0


class ResourceLibrary:
    """Owns the branch state and catalog for one configured repository."""

    def __init__(
        self,
        owner: str,
        repo: str,
        branch: str = "",
        token: str = "",
        *,
        strategy: str = "tree",
        api_url: str = GITHUB_API_URL,
        web_url: str = DEFAULT_WEB_URL,
        raw_url: str = DEFAULT_RAW_URL,
        client_factory: Callable[[], httpx.AsyncClient] = httpx.AsyncClient,
    ) -> None:
        self.owner = owner
        self.repo = repo
        self.configured_branch = branch
        self.strategy = strategy
        self._token = token
        self._web_url = web_url
        self._raw_url = raw_url
        self._client_factory = client_factory

        self.resolver = BranchResolver(owner, repo, token, api_url=api_url)
        self.enumerator = build_enumerator(strategy, token, api_url=api_url)
        self.store = CatalogStore()
        self.status = LibraryStatus.IDLE
        self.last_error: CatalogError | None = None
        self.last_report: RebuildReport | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> ResourceLibrary:
        return cls(
            settings.repo_owner,
            settings.repo_name,
            settings.branch,
            settings.github_token,
            strategy=settings.enumeration_strategy,
            api_url=settings.github_api_url,
            web_url=settings.github_web_url,
            raw_url=settings.github_raw_url,
        )

    @property
    def branch(self) -> str:
        """The branch links point at: resolved, else configured, else the fallback."""
        return self.resolver.resolved or self.configured_branch or FALLBACK_BRANCH

    @property
    def links(self) -> LinkBuilder:
        return LinkBuilder(
            self.owner, self.repo, self.branch, web_url=self._web_url, raw_url=self._raw_url
        )

    async def rebuild(self) -> RebuildReport:
        """Resolve the branch, enumerate the repository and replace the catalog.

        Runs to completion with every request awaited in turn.  Category
        failures in a directory walk are reported in the returned
        ``RebuildReport``; any other failure leaves the previous catalog in
        place, records the error and re-raises it.

        Raises:
            CatalogError: If branch resolution, SHA resolution, the tree fetch
                or the root listing fails.  Unexpected exceptions are re-raised
                as-is after the status is set to ``ERROR``.
        """
        self.status = LibraryStatus.LOADING
        logger.info(
            "catalog_rebuild_started",
            owner=self.owner,
            repo=self.repo,
            strategy=self.strategy,
        )
        try:
            with structlog.contextvars.bound_contextvars(owner=self.owner, repo=self.repo):
                async with self._client_factory() as client:
                    branch = await self.resolver.resolve(client, self.configured_branch)
                    result = await self.enumerator.enumerate(
                        client, self.owner, self.repo, branch
                    )
        except CatalogError as exc:
            self.status = LibraryStatus.ERROR
            self.last_error = exc
            logger.error(
                "catalog_rebuild_failed",
                kind=exc.kind.value,
                diagnostic=self.diagnostic(exc),
            )
            raise
        except Exception as exc:
            self.status = LibraryStatus.ERROR
            self.last_error = CatalogError(
                ErrorKind.GENERIC,
                f"Unexpected failure while rebuilding the catalog: {exc!r}",
            )
            logger.exception("catalog_rebuild_crashed")
            raise

        records = normalize(result.entries)
        self.store.replace(records)
        self.status = LibraryStatus.READY
        self.last_error = None
        self.last_report = RebuildReport(
            branch=branch,
            strategy=self.strategy,
            records=len(records),
            failures=result.failures,
            truncated=result.truncated,
            skipped_directories=result.skipped_directories,
        )
        logger.info(
            "catalog_rebuilt",
            branch=branch,
            records=len(records),
            failed_categories=[f.category for f in result.failures],
        )
        return self.last_report

    def current_catalog(self) -> tuple[ResourceRecord, ...]:
        return self.store.current()

    def apply_filter(self, criteria: FilterCriteria) -> FilterResult:
        return filter_catalog(self.store.current(), criteria)

    def categories(self) -> list[str]:
        return category_options(self.store.current())

    def links_for(self, record: ResourceRecord) -> ResourceLinks:
        links = self.links
        download_url = links.build_download_url(record.path)
        subject, body = email_template(record.name, download_url)
        return ResourceLinks(
            view_url=links.build_view_url(record.path),
            download_url=download_url,
            download_label=links.download_label(record.path),
            share_text=share_text(record.name),
            email_subject=subject,
            email_body=body,
        )

    def diagnostic(self, exc: CatalogError) -> str:
        """Classified message plus the configuration needed to self-diagnose."""
        parts = [
            exc.message,
            f"repository={self.owner}/{self.repo}",
            f"configured_branch={self.configured_branch or '(auto-detect)'}",
            f"resolved_branch={self.resolver.resolved or '(unresolved)'}",
            f"token_configured={'yes' if self._token else 'no'}",
        ]
        if exc.rate_limit is not None and exc.rate_limit.summary():
            parts.append(f"rate_limit: {exc.rate_limit.summary()}")
        return " | ".join(parts)
