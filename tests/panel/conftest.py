"""Test fixtures for bookmark panel tests."""
from collections.abc import AsyncGenerator
from typing import Any
from unittest.mock import AsyncMock

import pytest

from core.auth import Session, SessionUser
from panel.bookmark_panel import BookmarkPanel
from schemas.bookmark import Bookmark


class FakeAuth:
    """AuthProvider with a settable session."""

    def __init__(self, session: Session | None) -> None:
        self.session = session

    async def get_session(self) -> Session | None:
        return self.session


class FakeRouter:
    """Router recording navigations."""

    def __init__(self) -> None:
        self.pushed: list[str] = []

    def push(self, path: str) -> None:
        self.pushed.append(path)


class FakeNotifier:
    """Notifier recording messages."""

    def __init__(self) -> None:
        self.successes: list[str] = []
        self.errors: list[str] = []

    def success(self, message: str) -> None:
        self.successes.append(message)

    def error(self, message: str) -> None:
        self.errors.append(message)


def translate(key: str, default: str | None = None, **params: Any) -> str:
    """Translator returning the default text (or the key), formatted with params."""
    return (default or key).format(**params)


def make_bookmark_data(
    bookmark_id: int = 1,
    surah: int = 1,
    verse: int = 1,
    notes: str = "",
    labels: list[str] | None = None,
    updated_at: str = "2024-01-01T00:00:00+00:00",
) -> dict[str, Any]:
    """A `users_bookmarks` row as the list endpoint returns it."""
    return {
        "id": bookmark_id,
        "bookmarkKey": f"{surah}:{verse}",
        "bookmarkItem": {"surah": surah, "verse": verse},
        "type": "verse",
        "updated_at": updated_at,
        "notes": notes,
        "labels": labels or [],
        "verse": {
            "id": surah * 1000 + verse,
            "page": 1,
            "verse_number": verse,
            "verse": "بِسْمِ اللَّهِ الرَّحْمَٰنِ الرَّحِيمِ",
            "transcription": "Bismillahirrahmanirrahim",
            "surah": {"id": surah, "name": "Fâtiha", "name_en": "Al-Fatiha"},
            "translations": [
                {"id": 9, "author_id": 105, "text": "In the name of Allah, the Merciful"},
            ],
        },
    }


def make_bookmark(**kwargs: Any) -> Bookmark:
    """A Bookmark model built from make_bookmark_data."""
    return Bookmark.model_validate(make_bookmark_data(**kwargs))


@pytest.fixture
def session() -> Session:
    return Session(user=SessionUser(id="user-1"))


@pytest.fixture
def auth(session: Session) -> FakeAuth:
    return FakeAuth(session)


@pytest.fixture
def api() -> AsyncMock:
    """BookmarksApi double returning two bookmarks."""
    mock = AsyncMock()
    mock.list_bookmarks.return_value = {
        "users_bookmarks": [
            make_bookmark_data(1, 2, 255, notes="Ayat al-Kursi", labels=["important", "quran"]),
            make_bookmark_data(2, 1, 1),
        ],
    }
    mock.mutate.return_value = {}
    return mock


@pytest.fixture
def router() -> FakeRouter:
    return FakeRouter()


@pytest.fixture
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture
def closed() -> list[bool]:
    return []


@pytest.fixture
async def panel(
    auth: FakeAuth,
    api: AsyncMock,
    router: FakeRouter,
    notifier: FakeNotifier,
    closed: list[bool],
) -> AsyncGenerator[BookmarkPanel]:
    """Bookmark panel wired to fakes; not mounted."""
    panel = BookmarkPanel(
        auth=auth,
        api=api,
        translator=translate,
        router=router,
        notifier=notifier,
        author_id=105,
        locale="en",
        on_close=lambda: closed.append(True),
    )
    yield panel
    await panel.close()
