"""Branch resolution: configured override or the repository's default branch."""

import httpx
import structlog

from resource_library.services.github_client import GITHUB_API_URL, get_repo_metadata

logger = structlog.get_logger()

# Used when repository metadata carries no ``default_branch`` field.
FALLBACK_BRANCH = "main"


class BranchResolver:
    """Resolves the effective branch once per session.

    The branch stays unresolved until the first successful ``resolve``; after
    that the name is memoized and never changes, so later calls make no
    network requests.
    """

    def __init__(
        self,
        owner: str,
        repo: str,
        token: str = "",
        *,
        api_url: str = GITHUB_API_URL,
    ) -> None:
        self.owner = owner
        self.repo = repo
        self._token = token
        self._api_url = api_url
        self._resolved: str | None = None

    @property
    def resolved(self) -> str | None:
        """The resolved branch name, or None while unresolved."""
        return self._resolved

    async def resolve(self, client: httpx.AsyncClient, configured_branch: str = "") -> str:
        """Return the branch to read.

        A non-empty *configured_branch* is used as-is without validation.
        Otherwise the repository's ``default_branch`` is looked up with a single
        metadata request, falling back to ``FALLBACK_BRANCH`` when absent.

        Raises:
            CatalogError: If the metadata lookup fails.  There is no fallback on
                failure so enumeration never runs against an unknown branch.
        """
        if self._resolved is not None:
            return self._resolved

        if configured_branch:
            self._resolved = configured_branch
            logger.info("branch_resolved", branch=configured_branch, source="configured")
            return self._resolved

        meta = await get_repo_metadata(
            client, self.owner, self.repo, self._token, api_url=self._api_url
        )
        self._resolved = meta.get("default_branch") or FALLBACK_BRANCH
        logger.info("branch_resolved", branch=self._resolved, source="default_branch")
        return self._resolved
