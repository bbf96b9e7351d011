"""Shared test fixtures: a fake GitHub API and a FastAPI test client."""

from collections.abc import AsyncGenerator
from typing import Any

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from resource_library.dependencies import get_library
from resource_library.main import app
from resource_library.services.library import ResourceLibrary

OWNER = "acme"
REPO = "handbook"


class FakeGitHub:
    """Route table for ``httpx.MockTransport`` keyed by decoded URL path.

    Unregistered paths answer 404.  Every request is recorded in ``requests``.
    """

    def __init__(self) -> None:
        self.routes: dict[str, dict[str, Any]] = {}
        self.failing: set[str] = set()
        self.requests: list[httpx.Request] = []

    def add(
        self,
        path: str,
        json: Any = None,
        *,
        status: int = 200,
        headers: dict[str, str] | None = None,
        text: str | None = None,
    ) -> None:
        self.routes[path] = {"status": status, "json": json, "headers": headers, "text": text}

    def fail_transport(self, path: str) -> None:
        self.failing.add(path)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path in self.failing:
            raise httpx.ConnectError("connection refused", request=request)
        route = self.routes.get(path)
        if route is None:
            return httpx.Response(404, json={"message": "Not Found"})
        if route["text"] is not None:
            return httpx.Response(route["status"], text=route["text"], headers=route["headers"])
        return httpx.Response(route["status"], json=route["json"], headers=route["headers"])

    def client_factory(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))

    @property
    def paths(self) -> list[str]:
        return [r.url.path for r in self.requests]


def repo_path(suffix: str = "") -> str:
    """Decoded API path for the test repository, e.g. ``repo_path('/contents')``."""
    return f"/repos/{OWNER}/{REPO}{suffix}"


@pytest.fixture
def github() -> FakeGitHub:
    """A fake GitHub API with nothing registered."""
    return FakeGitHub()


@pytest.fixture
def tree_repo(github: FakeGitHub) -> FakeGitHub:
    """A repository served through the recursive tree endpoints."""
    github.add(repo_path(), {"id": 1, "default_branch": "main"})
    github.add(repo_path("/git/refs/heads/main"), {"object": {"sha": "abc123"}})
    github.add(
        repo_path("/git/trees/abc123"),
        {
            "sha": "abc123",
            "truncated": False,
            "tree": [
                {"path": "README.md", "type": "blob"},
                {"path": "guides", "type": "tree"},
                {"path": "guides/Onboarding.pdf", "type": "blob"},
                {"path": "guides/setup/install notes.md", "type": "blob"},
                {"path": "slides", "type": "tree"},
                {"path": "slides/Kickoff.PPTX", "type": "blob"},
            ],
        },
    )
    return github


@pytest.fixture
def walk_repo(github: FakeGitHub) -> FakeGitHub:
    """A repository served through the contents (directory listing) endpoint."""
    github.add(repo_path(), {"id": 1, "default_branch": "main"})
    github.add(
        repo_path("/contents"),
        [
            {"path": "README.md", "type": "file"},
            {"path": "forms", "type": "dir"},
            {"path": "policies", "type": "dir"},
            {"path": "videos", "type": "dir"},
        ],
    )
    github.add(
        repo_path("/contents/forms"),
        [
            {"path": "forms/expense.xlsx", "type": "file"},
            {"path": "forms/archive", "type": "dir"},
        ],
    )
    github.add(
        repo_path("/contents/policies"),
        [{"path": "policies/leave.md", "type": "file"}],
    )
    github.add(
        repo_path("/contents/videos"),
        [{"path": "videos/welcome.mp4", "type": "file"}],
    )
    return github


@pytest.fixture
def make_library(github: FakeGitHub):
    """Factory building a ResourceLibrary wired to the fake GitHub API."""

    def _make(branch: str = "", token: str = "", strategy: str = "tree") -> ResourceLibrary:
        return ResourceLibrary(
            OWNER,
            REPO,
            branch,
            token,
            strategy=strategy,
            client_factory=github.client_factory,
        )

    return _make


@pytest.fixture
def library(make_library) -> ResourceLibrary:
    return make_library()


@pytest.fixture
async def client(library: ResourceLibrary) -> AsyncGenerator[AsyncClient, None]:
    """Yield an httpx AsyncClient against the app with the library overridden."""
    app.dependency_overrides[get_library] = lambda: library
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
