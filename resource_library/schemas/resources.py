"""Pydantic models for the resource catalog endpoints."""

from pydantic import BaseModel, Field


class ResourceItem(BaseModel):
    """A catalog record plus its view, download, share and email links."""

    path: str
    name: str
    category: str = Field(description="Top-level directory, empty for root files")
    view_url: str
    download_url: str
    download_label: str = Field(description="'Download' for binary files, else 'View Raw'")
    share_text: str
    email_subject: str
    email_body: str


class ErrorDetail(BaseModel):
    """A classified catalog failure."""

    kind: str
    message: str
    status: int | None = None
    branch: str | None = None
    diagnostic: str


class ResourceListResponse(BaseModel):
    """Response body for GET /resources."""

    status: str = Field(description="idle, loading, ready, or error")
    branch: str | None
    total: int
    matched: int
    categories: list[str] = Field(description="Selector options; '' means all categories")
    resources: list[ResourceItem]
    message: str | None = None
    error: ErrorDetail | None = None


class CategoryListResponse(BaseModel):
    """Response body for GET /resources/categories."""

    categories: list[str]


class CategoryFailureItem(BaseModel):
    """A category directory that could not be listed during a rebuild."""

    category: str
    kind: str
    cause: str
    message: str


class RebuildResponse(BaseModel):
    """Response body for POST /resources/rebuild."""

    status: str
    branch: str
    strategy: str
    resources: int
    truncated: bool = False
    skipped_directories: int = 0
    failures: list[CategoryFailureItem] = []
