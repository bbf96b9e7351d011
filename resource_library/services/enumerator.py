"""Tree enumeration strategies.

Two interchangeable implementations of the ``TreeEnumerator`` protocol:

- ``RecursiveTreeEnumerator`` resolves the branch to a commit SHA and fetches
  the whole Git tree in one recursive request.  Every depth is covered.
- ``DirectoryWalkEnumerator`` lists the repository root, treats each top-level
  directory as a category and lists each one in turn.  Only two levels are
  covered: root files and the files directly inside each category.  Deeper
  directories are counted and logged but never descended into.

Both issue their requests sequentially.  In the directory walk, a failing
category listing is recorded and skipped; a failing root listing (or, for the
recursive strategy, a failing SHA/tree lookup) aborts the enumeration.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

import httpx
import structlog

from resource_library.services.catalog import TreeEntry
from resource_library.services.errors import CatalogError, ErrorKind
from resource_library.services.github_client import (
    GITHUB_API_URL,
    get_branch_sha,
    get_ref_sha,
    get_tree,
    list_directory,
)

logger = structlog.get_logger()


@dataclass(frozen=True)
class CategoryFailure:
    """A recoverable failure to list one category directory."""

    category: str
    error: CatalogError

    @property
    def kind(self) -> ErrorKind:
        return ErrorKind.PARTIAL_CATEGORY_FAILURE

    @property
    def message(self) -> str:
        return f"Category '{self.category}' could not be loaded: {self.error.message}"


@dataclass
class EnumerationResult:
    """Entries discovered by one enumeration run, in API response order."""

    entries: list[TreeEntry] = field(default_factory=list)
    failures: list[CategoryFailure] = field(default_factory=list)
    truncated: bool = False
    skipped_directories: int = 0


class TreeEnumerator(Protocol):
    """Protocol for listing repository paths at a branch."""

    async def enumerate(
        self, client: httpx.AsyncClient, owner: str, repo: str, branch: str
    ) -> EnumerationResult:
        """Return every discoverable entry of the repository at *branch*."""
        ...


class RecursiveTreeEnumerator:
    """Single recursive Git tree fetch keyed by the branch's commit SHA."""

    def __init__(self, token: str = "", *, api_url: str = GITHUB_API_URL) -> None:
        self._token = token
        self._api_url = api_url

    async def resolve_commit_sha(
        self, client: httpx.AsyncClient, owner: str, repo: str, branch: str
    ) -> str:
        """Resolve *branch* to a commit SHA.

        Tries the git refs endpoint first and, only if that fails or returns no
        SHA, the branches endpoint.  A failure of the second lookup propagates.
        """
        try:
            sha = await get_ref_sha(
                client, owner, repo, branch, self._token, api_url=self._api_url
            )
            if sha:
                return sha
        except CatalogError as exc:
            logger.warning(
                "ref_lookup_failed_trying_branches",
                branch=branch,
                kind=exc.kind.value,
                error=exc.message,
            )

        sha = await get_branch_sha(
            client, owner, repo, branch, self._token, api_url=self._api_url
        )
        if sha:
            return sha
        msg = f"Unable to resolve branch '{branch}' of {owner}/{repo} to a commit SHA."
        raise CatalogError(ErrorKind.GENERIC, msg)

    async def enumerate(
        self, client: httpx.AsyncClient, owner: str, repo: str, branch: str
    ) -> EnumerationResult:
        sha = await self.resolve_commit_sha(client, owner, repo, branch)
        data = await get_tree(client, owner, repo, sha, self._token, api_url=self._api_url)

        entries = [TreeEntry.from_api(item) for item in data.get("tree") or []]
        truncated = bool(data.get("truncated"))
        if truncated:
            logger.warning("tree_truncated", owner=owner, repo=repo, sha=sha, entries=len(entries))

        logger.info("tree_fetched", owner=owner, repo=repo, sha=sha, entries=len(entries))
        return EnumerationResult(entries=entries, truncated=truncated)


class DirectoryWalkEnumerator:
    """Root listing plus one listing per top-level directory (category)."""

    def __init__(self, token: str = "", *, api_url: str = GITHUB_API_URL) -> None:
        self._token = token
        self._api_url = api_url

    async def enumerate(
        self, client: httpx.AsyncClient, owner: str, repo: str, branch: str
    ) -> EnumerationResult:
        root = await list_directory(
            client, owner, repo, "", branch, self._token, api_url=self._api_url
        )

        result = EnumerationResult()
        categories: list[str] = []
        for item in root:
            entry = TreeEntry.from_api(item)
            result.entries.append(entry)
            if entry.is_dir:
                categories.append(entry.path)

        for category in categories:
            try:
                listing = await list_directory(
                    client, owner, repo, category, branch, self._token, api_url=self._api_url
                )
            except CatalogError as exc:
                logger.warning(
                    "category_listing_failed",
                    category=category,
                    kind=exc.kind.value,
                    error=exc.message,
                )
                result.failures.append(CategoryFailure(category=category, error=exc))
                continue

            for item in listing:
                entry = TreeEntry.from_api(item, category_hint=category)
                if entry.is_dir:
                    result.skipped_directories += 1
                    logger.debug("nested_directory_skipped", path=entry.path)
                result.entries.append(entry)

        logger.info(
            "directory_walk_complete",
            owner=owner,
            repo=repo,
            categories=len(categories),
            failed_categories=len(result.failures),
            entries=len(result.entries),
            skipped_directories=result.skipped_directories,
        )
        return result


def build_enumerator(
    strategy: str, token: str = "", *, api_url: str = GITHUB_API_URL
) -> TreeEnumerator:
    """Return the enumerator for a configured strategy name (``tree`` or ``walk``)."""
    if strategy == "tree":
        return RecursiveTreeEnumerator(token, api_url=api_url)
    if strategy == "walk":
        return DirectoryWalkEnumerator(token, api_url=api_url)
    msg = f"Unknown enumeration strategy: {strategy!r}"
    raise ValueError(msg)
