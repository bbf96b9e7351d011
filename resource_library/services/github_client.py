"""GitHub REST API client for repository metadata, refs, trees and directory listings.

Every call goes through ``_api_get`` which attaches the standard GitHub
headers (plus Bearer auth when a token is configured) and converts any
failure into a classified ``CatalogError``.
"""

from urllib.parse import quote

import httpx
import structlog

from resource_library.services.errors import (
    CatalogError,
    ErrorKind,
    RateLimitInfo,
    classify,
    describe,
)
from resource_library.services.links import encode_path

logger = structlog.get_logger()

GITHUB_API_URL = "https://api.github.com"

_GITHUB_HEADERS_BASE = {
    "Accept": "application/vnd.github+json",
    "X-GitHub-Api-Version": "2022-11-28",
}


def _auth_headers(token: str) -> dict[str, str]:
    """Build GitHub API headers, adding Bearer auth only when a token is set."""
    if not token:
        return dict(_GITHUB_HEADERS_BASE)
    return {**_GITHUB_HEADERS_BASE, "Authorization": f"Bearer {token}"}


async def _api_get(
    client: httpx.AsyncClient,
    url: str,
    token: str,
    *,
    context: str,
    params: dict[str, str] | None = None,
) -> object:
    """GET a GitHub API URL and return the parsed JSON body.

    Raises:
        CatalogError: ``NETWORK_FAILURE`` when the request itself failed,
            ``GENERIC`` for a 2xx body that is not JSON, otherwise the kind
            chosen by ``classify`` for the status code.
    """
    try:
        resp = await client.get(url, params=params, headers=_auth_headers(token))
    except httpx.RequestError as exc:
        logger.error("github_network_failure", url=url, context=context, error=str(exc))
        raise CatalogError(
            ErrorKind.NETWORK_FAILURE,
            describe(ErrorKind.NETWORK_FAILURE, body=str(exc), context=context),
            url=url,
        ) from exc

    if resp.is_success:
        try:
            return resp.json()
        except ValueError as exc:
            logger.error(
                "github_invalid_json",
                status=resp.status_code,
                url=url,
                context=context,
                body=resp.text[:500],
            )
            raise CatalogError(
                ErrorKind.GENERIC,
                describe(
                    ErrorKind.GENERIC,
                    status=resp.status_code,
                    body=f"expected JSON, got: {resp.text}",
                    context=context,
                ),
                status=resp.status_code,
                url=url,
            ) from exc

    rate_limit = RateLimitInfo.from_headers(resp.headers)
    body = resp.text
    kind = classify(resp.status_code, rate_limit, body)
    logger.error(
        "github_api_error",
        status=resp.status_code,
        url=url,
        context=context,
        kind=kind.value,
        rate_limit=rate_limit.summary(),
        body=body[:500],
    )
    raise CatalogError(
        kind,
        describe(
            kind,
            status=resp.status_code,
            rate_limit=rate_limit,
            body=body,
            context=context,
            authenticated=bool(token),
        ),
        status=resp.status_code,
        url=url,
        rate_limit=rate_limit,
    )


async def get_repo_metadata(
    client: httpx.AsyncClient,
    owner: str,
    repo: str,
    token: str = "",
    *,
    api_url: str = GITHUB_API_URL,
) -> dict:
    """Fetch repository metadata (id, default_branch, etc.) from GitHub.

    Returns the parsed JSON response dict.

    Raises:
        CatalogError: On transport failure or non-2xx responses.
    """
    url = f"{api_url}/repos/{owner}/{repo}"
    data = await _api_get(client, url, token, context="repository metadata")
    return data if isinstance(data, dict) else {}


async def get_ref_sha(
    client: httpx.AsyncClient,
    owner: str,
    repo: str,
    branch: str,
    token: str = "",
    *,
    api_url: str = GITHUB_API_URL,
) -> str | None:
    """Resolve a branch to its head commit SHA through the git refs endpoint.

    Returns None when the response carries no ``object.sha``.
    """
    url = f"{api_url}/repos/{owner}/{repo}/git/refs/heads/{quote(branch, safe='')}"
    data = await _api_get(client, url, token, context=f"ref heads/{branch}")
    if isinstance(data, dict):
        return (data.get("object") or {}).get("sha")
    return None


async def get_branch_sha(
    client: httpx.AsyncClient,
    owner: str,
    repo: str,
    branch: str,
    token: str = "",
    *,
    api_url: str = GITHUB_API_URL,
) -> str | None:
    """Resolve a branch to its head commit SHA through the branches endpoint.

    Returns None when the response carries no ``commit.sha``.
    """
    url = f"{api_url}/repos/{owner}/{repo}/branches/{quote(branch, safe='')}"
    data = await _api_get(client, url, token, context=f"branch {branch}")
    if isinstance(data, dict):
        return (data.get("commit") or {}).get("sha")
    return None


async def get_tree(
    client: httpx.AsyncClient,
    owner: str,
    repo: str,
    sha: str,
    token: str = "",
    *,
    api_url: str = GITHUB_API_URL,
) -> dict:
    """Fetch the full recursive Git tree for a commit SHA.

    Returns the parsed JSON dict with ``tree`` (list of entries) and
    ``truncated`` keys.
    """
    url = f"{api_url}/repos/{owner}/{repo}/git/trees/{sha}"
    data = await _api_get(
        client, url, token, context=f"tree {sha}", params={"recursive": "1"}
    )
    return data if isinstance(data, dict) else {}


async def list_directory(
    client: httpx.AsyncClient,
    owner: str,
    repo: str,
    path: str,
    ref: str,
    token: str = "",
    *,
    api_url: str = GITHUB_API_URL,
) -> list[dict]:
    """List the immediate entries of a directory via the contents API.

    An empty *path* lists the repository root.  A single-file response is
    wrapped in a one-element list.
    """
    suffix = f"/{encode_path(path.strip('/'))}" if path.strip("/") else ""
    url = f"{api_url}/repos/{owner}/{repo}/contents{suffix}"
    data = await _api_get(
        client,
        url,
        token,
        context=f"directory listing '{path or '/'}'",
        params={"ref": ref},
    )
    if isinstance(data, dict):
        return [data]
    return list(data) if isinstance(data, list) else []
