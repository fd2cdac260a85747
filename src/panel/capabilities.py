"""Collaborators the bookmark panel depends on, passed in explicitly."""
from typing import Any, Protocol

from core.auth import Session


class AuthProvider(Protocol):
    """Session lookup for the current user."""

    async def get_session(self) -> Session | None:
        """Return the current session, or None when signed out."""
        ...


class Router(Protocol):
    """Client-side navigation."""

    def push(self, path: str) -> None:
        """Navigate to path."""
        ...


class Translator(Protocol):
    """Looks up display strings by key."""

    def __call__(self, key: str, default: str | None = None, **params: Any) -> str:
        """Return the translated string for key, falling back to default."""
        ...


class Notifier(Protocol):
    """Transient user notifications (toasts)."""

    def success(self, message: str) -> None:
        """Show a success notification."""
        ...

    def error(self, message: str) -> None:
        """Show an error notification."""
        ...


class BookmarksApi(Protocol):
    """The list and mutation endpoints, as seen by the panel."""

    async def list_bookmarks(
        self, author: int | None = None, search_term: str = "",
    ) -> dict[str, Any]:
        """Fetch the bookmark list payload."""
        ...

    async def mutate(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Send an add/remove mutation."""
        ...
