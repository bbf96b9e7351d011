"""Centralized FastAPI dependencies for use with Depends()."""

from resource_library.config import settings
from resource_library.services.library import ResourceLibrary

_library: ResourceLibrary | None = None


def get_library() -> ResourceLibrary:
    """Return the session's ResourceLibrary, creating it from settings on first use.

    One instance per process so the resolved branch and catalog persist
    across requests.  Tests override this with ``app.dependency_overrides``.
    """
    global _library  # noqa: PLW0603

    if _library is None:
        _library = ResourceLibrary.from_settings(settings)
    return _library


__all__ = ["get_library"]
