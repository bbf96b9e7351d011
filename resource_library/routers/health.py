"""Health check endpoint reporting catalog state."""

from typing import Annotated

from fastapi import APIRouter, Depends

from resource_library.dependencies import get_library
from resource_library.schemas.health import HealthResponse
from resource_library.services.library import ResourceLibrary

router = APIRouter()


@router.get("/healthz", response_model=HealthResponse)
async def healthz(library: Annotated[ResourceLibrary, Depends(get_library)]) -> HealthResponse:
    """Report liveness plus the catalog status and size.

    Always 200: a failed catalog build is a data problem, not a dead process.
    """
    return HealthResponse(
        status="ok",
        catalog=library.status.value,
        resources=len(library.current_catalog()),
    )
