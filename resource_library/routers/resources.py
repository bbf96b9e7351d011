"""Resource catalog endpoints: filtered listing, category options and rebuild."""

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, HTTPException, status

from resource_library.dependencies import get_library
from resource_library.schemas.resources import (
    CategoryFailureItem,
    CategoryListResponse,
    ErrorDetail,
    RebuildResponse,
    ResourceItem,
    ResourceListResponse,
)
from resource_library.services.errors import CatalogError
from resource_library.services.filter_index import NO_MATCHES_MESSAGE, FilterCriteria
from resource_library.services.library import LibraryStatus, ResourceLibrary

logger = structlog.get_logger()

router = APIRouter(prefix="/resources", tags=["resources"])

Library = Annotated[ResourceLibrary, Depends(get_library)]

LOADING_MESSAGE = "Loading resources…"


def error_detail(library: ResourceLibrary, exc: CatalogError) -> ErrorDetail:
    return ErrorDetail(
        kind=exc.kind.value,
        message=exc.message,
        status=exc.status,
        branch=library.resolver.resolved,
        diagnostic=library.diagnostic(exc),
    )


@router.get("")
async def list_resources(
    library: Library,
    q: str = "",
    category: str = "",
) -> ResourceListResponse:
    """Return the catalog filtered by free-text query and category.

    An empty result is reported with an explicit message, distinct from the
    loading and error states.
    """
    result = library.apply_filter(FilterCriteria(query=q, category=category))

    items = []
    for record in result.records:
        links = library.links_for(record)
        items.append(
            ResourceItem(
                path=record.path,
                name=record.name,
                category=record.category,
                view_url=links.view_url,
                download_url=links.download_url,
                download_label=links.download_label,
                share_text=links.share_text,
                email_subject=links.email_subject,
                email_body=links.email_body,
            )
        )

    message = None
    error = None
    if library.status is LibraryStatus.ERROR and library.last_error is not None:
        error = error_detail(library, library.last_error)
        message = error.message
    elif library.status in (LibraryStatus.IDLE, LibraryStatus.LOADING):
        message = LOADING_MESSAGE
    elif result.empty:
        message = NO_MATCHES_MESSAGE

    return ResourceListResponse(
        status=library.status.value,
        branch=library.resolver.resolved,
        total=result.total,
        matched=len(items),
        categories=library.categories(),
        resources=items,
        message=message,
        error=error,
    )


@router.get("/categories")
async def list_categories(library: Library) -> CategoryListResponse:
    """Return the category selector options ('' first, meaning all)."""
    return CategoryListResponse(categories=library.categories())


@router.post("/rebuild")
async def rebuild(library: Library) -> RebuildResponse:
    """Reload the catalog from GitHub.

    Category listing failures are returned in ``failures`` with a 200;
    fatal failures return 502 with the classified ``ErrorDetail`` under
    ``detail``, the usual ``HTTPException`` body.
    """
    try:
        report = await library.rebuild()
    except CatalogError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=error_detail(library, exc).model_dump(),
        ) from None

    return RebuildResponse(
        status="partial" if report.failures else "ok",
        branch=report.branch,
        strategy=report.strategy,
        resources=report.records,
        truncated=report.truncated,
        skipped_directories=report.skipped_directories,
        failures=[
            CategoryFailureItem(
                category=failure.category,
                kind=failure.kind.value,
                cause=failure.error.kind.value,
                message=failure.message,
            )
            for failure in report.failures
        ],
    )
