"""Error classification for failed GitHub API calls.

Every failed call is turned into a ``CatalogError`` carrying a machine-checkable
``ErrorKind`` plus a human-readable message.  Messages are built here and only
here so that routers and the library report failures uniformly.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx

# Response bodies are truncated to this many characters in GENERIC messages.
MAX_BODY_CHARS: int = 200


class ErrorKind(StrEnum):
    """Typed failure reasons surfaced to callers."""

    NETWORK_FAILURE = "network_failure"
    RATE_LIMITED = "rate_limited"
    NOT_FOUND = "not_found"
    REPOSITORY_EMPTY_OR_BRANCH_MISSING = "repository_empty_or_branch_missing"
    PARTIAL_CATEGORY_FAILURE = "partial_category_failure"
    GENERIC = "generic"


@dataclass(frozen=True)
class RateLimitInfo:
    """Values of the ``X-RateLimit-*`` response headers, all optional."""

    limit: str | None = None
    remaining: str | None = None
    reset: str | None = None
    resource: str | None = None

    @classmethod
    def from_headers(cls, headers: httpx.Headers | dict[str, str]) -> RateLimitInfo:
        """Extract rate-limit values from response headers (case-insensitive)."""
        lowered = {k.lower(): v for k, v in headers.items()}
        return cls(
            limit=lowered.get("x-ratelimit-limit"),
            remaining=lowered.get("x-ratelimit-remaining"),
            reset=lowered.get("x-ratelimit-reset"),
            resource=lowered.get("x-ratelimit-resource"),
        )

    @property
    def exhausted(self) -> bool:
        return self.remaining is not None and self.remaining.strip() == "0"

    def reset_at(self) -> str | None:
        """Return the reset time as an ISO-8601 UTC string, if parseable."""
        if self.reset and self.reset.isdigit():
            return datetime.fromtimestamp(int(self.reset), tz=UTC).isoformat()
        return None

    def summary(self) -> str:
        parts: list[str] = []
        if self.remaining is not None:
            parts.append(f"remaining={self.remaining}")
        if self.limit is not None:
            parts.append(f"limit={self.limit}")
        if self.resource is not None:
            parts.append(f"resource={self.resource}")
        reset_at = self.reset_at()
        if reset_at:
            parts.append(f"reset_utc={reset_at}")
        return " ".join(parts)


class ResourceLibraryError(Exception):
    """Base exception for the resource library."""


class CatalogError(ResourceLibraryError):
    """A classified failure while building the catalog."""

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        *,
        status: int | None = None,
        url: str | None = None,
        rate_limit: RateLimitInfo | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status = status
        self.url = url
        self.rate_limit = rate_limit


def classify(status: int, rate_limit: RateLimitInfo | None, body: str = "") -> ErrorKind:
    """Map a non-success HTTP status to an ``ErrorKind``.

    A 403 only counts as a rate limit when the remaining quota is zero;
    other 403s (e.g. permission problems) are ``GENERIC``.
    """
    if status == 403 and rate_limit is not None and rate_limit.exhausted:
        return ErrorKind.RATE_LIMITED
    if status == 409:
        return ErrorKind.REPOSITORY_EMPTY_OR_BRANCH_MISSING
    if status == 404:
        return ErrorKind.NOT_FOUND
    return ErrorKind.GENERIC


def describe(
    kind: ErrorKind,
    *,
    status: int | None = None,
    rate_limit: RateLimitInfo | None = None,
    body: str = "",
    context: str = "",
    authenticated: bool = False,
) -> str:
    """Build the human-readable diagnostic for a classified failure.

    Args:
        kind: The classified failure reason.
        status: HTTP status code, when a response was received.
        rate_limit: Rate-limit values from the failed response.
        body: Raw response body (truncated for GENERIC failures).
        context: What was being fetched, e.g. ``"repository metadata"``.
        authenticated: Whether a GitHub token was attached to the request.
    """
    where = f" while fetching {context}" if context else ""

    if kind is ErrorKind.RATE_LIMITED:
        limit = rate_limit.limit if rate_limit and rate_limit.limit else "unknown"
        reset_at = rate_limit.reset_at() if rate_limit else None
        msg = f"GitHub API rate limit exceeded{where} (limit {limit} requests/hour"
        msg += f", resets at {reset_at})." if reset_at else ")."
        if authenticated:
            return f"{msg} Wait for the quota to reset."
        return f"{msg} Configure a GitHub token for a higher limit, or wait for the quota to reset."

    if kind is ErrorKind.REPOSITORY_EMPTY_OR_BRANCH_MISSING:
        return (
            f"GitHub returned 409{where}: the repository is empty "
            "or the branch has no commits yet."
        )

    if kind is ErrorKind.NOT_FOUND:
        msg = (
            f"GitHub returned 404{where}. Possible causes: wrong owner, wrong repository "
            "name, wrong branch, wrong path, or the repository is private and not "
            "visible with the current credentials."
        )
        if not authenticated:
            msg += " If the repository is private, configure a GitHub token."
        return msg

    if kind is ErrorKind.NETWORK_FAILURE:
        detail = f": {body}" if body else ""
        return f"Network failure{where}{detail}. Check connectivity to the GitHub API."

    snippet = body[:MAX_BODY_CHARS]
    if not snippet:
        return f"GitHub API error {status}{where}."
    return f"GitHub API error {status}{where}: {snippet}"
