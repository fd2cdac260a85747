"""
Bookmark panel controller.

Holds the signed-in user's bookmark list, the per-item edit drafts and the
search box state, and drives the list and mutation endpoints. Rendering is
left to the caller: `view` says which state to show and `entries()` gives
display-ready rows.
"""
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

import httpx
from pydantic import ValidationError

from core.auth import Session
from core.config import Settings
from panel.capabilities import AuthProvider, BookmarksApi, Notifier, Router, Translator
from panel.client import BookmarksApiError
from panel.debounce import Debouncer
from panel.formatting import (
    format_time_ago,
    format_timestamp,
    page_path,
    verse_line,
    verse_path,
)
from panel.labels import format_labels, parse_labels
from panel.state import (
    EditDraft,
    ItemRemoved,
    ItemSaved,
    ListLoaded,
    PanelView,
    reduce_bookmarks,
    resolve_view,
)
from schemas.bookmark import Bookmark, BookmarkListResponse

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 0.5

# Errors a call to BookmarksApi may raise
API_ERRORS = (BookmarksApiError, httpx.HTTPError)


@dataclass(frozen=True)
class BookmarkEntry:
    """Display-ready row for one bookmark."""

    bookmark: Bookmark
    heading: str
    translation: str
    verse_text: str
    transcription: str
    notes: str
    labels: list[str]
    time_ago: str
    timestamp: str
    editing: bool
    draft_notes: str
    draft_labels_text: str


def _saved_at(result: dict[str, Any]) -> datetime:
    """Timestamp the data service assigned to an upsert, or now if it wasn't returned."""
    row = result.get("insert_users_bookmarks_one") or {}
    value = row.get("updated_at") if isinstance(row, dict) else None
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            logger.debug("Unparseable updated_at in save result: %s", value)
    return datetime.now(UTC)


class BookmarkPanel:
    """
    Controller for the bookmarks modal.

    Each bookmark is either viewed or edited; an entry in `editing` exists
    exactly while its bookmark is in edit mode. List fetches are numbered and
    only the latest one may replace the list.
    """

    def __init__(
        self,
        *,
        auth: AuthProvider,
        api: BookmarksApi,
        translator: Translator,
        router: Router,
        notifier: Notifier,
        author_id: int | None = None,
        locale: str = "en",
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        on_close: Callable[[], None] | None = None,
        on_login: Callable[[], None] | None = None,
    ) -> None:
        self._auth = auth
        self._api = api
        self._t = translator
        self._router = router
        self._notifier = notifier
        self._on_close = on_close
        self._on_login = on_login
        self.author_id = author_id
        self.locale = locale

        self.session: Session | None = None
        self.bookmarks: list[Bookmark] = []
        self.editing: dict[int | str, EditDraft] = {}
        self.search_term = ""
        # Term the displayed list was loaded with
        self.loaded_term = ""
        self.is_loading = True
        self.load_failed = False

        self._generation = 0
        self._debouncer = Debouncer(debounce_seconds, self._run_search)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        auth: AuthProvider,
        api: BookmarksApi,
        translator: Translator,
        router: Router,
        notifier: Notifier,
        on_close: Callable[[], None] | None = None,
        on_login: Callable[[], None] | None = None,
    ) -> "BookmarkPanel":
        """Build a panel using the configured author, locale and search delay."""
        return cls(
            auth=auth,
            api=api,
            translator=translator,
            router=router,
            notifier=notifier,
            author_id=settings.default_author_id,
            locale=settings.locale,
            debounce_seconds=settings.search_debounce_seconds,
            on_close=on_close,
            on_login=on_login,
        )

    @property
    def debounce_seconds(self) -> float:
        """Quiet period before a search runs."""
        return self._debouncer.delay

    # --- session & loading ---

    @property
    def signed_in(self) -> bool:
        """Whether a user identity is available."""
        return self.session is not None and bool(self.session.user.id)

    @property
    def view(self) -> PanelView:
        """Which state the panel should render."""
        return resolve_view(
            signed_in=self.signed_in,
            is_loading=self.is_loading,
            load_failed=self.load_failed,
            search_term=self.loaded_term,
            bookmark_count=len(self.bookmarks),
        )

    async def mount(self) -> None:
        """Read the session and load the list if signed in."""
        await self.session_changed()

    async def session_changed(self) -> None:
        """Re-read the session; load the list once a user identity is available."""
        self.session = await self._auth.get_session()
        if not self.signed_in:
            # Anything still in flight belongs to the previous session
            self._generation += 1
            self._debouncer.cancel()
            self.bookmarks = []
            self.editing.clear()
            self.loaded_term = ""
            self.is_loading = False
            self.load_failed = False
            return
        await self.refresh()

    async def refresh(self) -> None:
        """Load the list for the current search term."""
        await self._load(self.search_term)

    def set_search_term(self, term: str) -> None:
        """Update the search box; the list reloads after the input goes quiet."""
        self.search_term = term
        if self.signed_in:
            self._debouncer.trigger()

    async def _run_search(self) -> None:
        if self.signed_in:
            await self._load(self.search_term)

    async def _load(self, term: str) -> None:
        self._generation += 1
        generation = self._generation
        self.is_loading = True

        try:
            data = await self._api.list_bookmarks(author=self.author_id, search_term=term)
            loaded = BookmarkListResponse.model_validate(data).users_bookmarks
        except (*API_ERRORS, ValidationError) as e:
            if generation != self._generation:
                return
            logger.warning("Failed to load bookmarks: %s", e)
            self.is_loading = False
            self.load_failed = True
            self._notifier.error(self._t("bookmark__load_error", "Could not load bookmarks."))
            return

        if generation != self._generation:
            logger.debug(
                "Discarding stale bookmark list (request %s of %s)", generation, self._generation,
            )
            return

        self.bookmarks = reduce_bookmarks(self.bookmarks, ListLoaded(loaded))
        self.is_loading = False
        self.load_failed = False
        self.loaded_term = term

    # --- editing ---

    def is_editing(self, bookmark_id: int | str) -> bool:
        """Whether the bookmark is in edit mode."""
        return bookmark_id in self.editing

    def edit(self, bookmark: Bookmark) -> None:
        """Enter edit mode, seeding the draft from the bookmark's current values."""
        self.editing[bookmark.id] = EditDraft.from_bookmark(bookmark)

    def change_notes(self, bookmark_id: int | str, notes: str) -> None:
        """Update the draft notes of a bookmark in edit mode."""
        draft = self.editing.get(bookmark_id)
        if draft is not None:
            draft.notes = notes

    def change_labels(self, bookmark_id: int | str, text: str) -> None:
        """Update the draft labels from comma-separated editor text."""
        draft = self.editing.get(bookmark_id)
        if draft is not None:
            draft.labels = parse_labels(text)

    def cancel_edit(self, bookmark_id: int | str) -> None:
        """Leave edit mode, discarding the draft."""
        self.editing.pop(bookmark_id, None)

    async def save(self, bookmark: Bookmark) -> bool:
        """
        Save the draft of a bookmark in edit mode.

        On success the list entry is patched in place and edit mode ends. On
        failure the draft is kept so the user can retry.

        Returns:
            True if the bookmark was saved.
        """
        draft = self.editing.get(bookmark.id)
        if draft is None:
            return False

        verse_id = bookmark.resolved_verse_id
        if verse_id is None:
            self._notifier.error(
                self._t("bookmark__error_missing_verse_id", "Missing verse information to save."),
            )
            return False

        notes = draft.notes
        labels = list(draft.labels)
        payload = {
            "action": "add",
            "bookmarkKey": bookmark.bookmark_key,
            "verseId": verse_id,
            "type": bookmark.type,
            "bookmarkItem": bookmark.bookmark_item,
            "labels": labels,
            "notes": notes,
        }

        try:
            result = await self._api.mutate(payload)
        except API_ERRORS as e:
            logger.warning("Failed to save bookmark %s: %s", bookmark.bookmark_key, e)
            message = e.message if isinstance(e, BookmarksApiError) else ""
            fallback = self._t("bookmark__save_error", "Error saving bookmark!")
            self._notifier.error(message or fallback)
            return False

        self.bookmarks = reduce_bookmarks(
            self.bookmarks,
            ItemSaved(
                bookmark_id=bookmark.id,
                notes=notes,
                labels=labels,
                updated_at=_saved_at(result),
            ),
        )
        self.cancel_edit(bookmark.id)
        self._notifier.success(self._t("bookmark__save_success", "Bookmark saved!"))
        return True

    async def remove(self, bookmark: Bookmark) -> bool:
        """
        Delete a bookmark; on success it leaves the list.

        Returns:
            True if the bookmark was removed.
        """
        try:
            await self._api.mutate({"action": "remove", "bookmarkKey": bookmark.bookmark_key})
        except API_ERRORS as e:
            logger.warning("Failed to remove bookmark %s: %s", bookmark.bookmark_key, e)
            self._notifier.error(self._t("bookmark__remove_error", "Error removing bookmark!"))
            return False

        self.bookmarks = reduce_bookmarks(self.bookmarks, ItemRemoved(bookmark.bookmark_key))
        self.cancel_edit(bookmark.id)
        self._notifier.success(self._t("bookmark__remove_success", "Bookmark removed."))
        return True

    # --- navigation ---

    def open_verse(self, bookmark: Bookmark) -> None:
        """Go to the verse detail page and close the panel."""
        path = verse_path(bookmark)
        if path is not None:
            self._router.push(path)
            self._close_modal()

    def open_page(self, bookmark: Bookmark) -> None:
        """Go to the page containing the verse and close the panel."""
        path = page_path(bookmark)
        if path is not None:
            self._router.push(path)
            self._close_modal()

    def request_login(self) -> None:
        """Hand over to the login flow from the login-required state."""
        if self._on_login is not None:
            self._on_login()

    def _close_modal(self) -> None:
        if self._on_close is not None:
            self._on_close()

    async def close(self) -> None:
        """Tear down: cancel the pending search and any fetch still running."""
        await self._debouncer.aclose()

    # --- rendering ---

    def entries(self, now: datetime | None = None) -> list[BookmarkEntry]:
        """Display-ready rows for the current list."""
        rows = []
        for bookmark in self.bookmarks:
            verse = bookmark.verse
            draft = self.editing.get(bookmark.id)
            rows.append(
                BookmarkEntry(
                    bookmark=bookmark,
                    heading=verse_line(bookmark, self._t, self.locale),
                    translation=verse.translations[0].text if verse and verse.translations else "",
                    verse_text=verse.verse if verse else "",
                    transcription=verse.transcription if verse else "",
                    notes=bookmark.notes or "",
                    labels=list(bookmark.labels or []),
                    time_ago=format_time_ago(bookmark.updated_at, self._t, now=now),
                    timestamp=format_timestamp(bookmark.updated_at),
                    editing=draft is not None,
                    draft_notes=draft.notes if draft else "",
                    draft_labels_text=format_labels(draft.labels) if draft else "",
                ),
            )
        return rows

    def empty_state_text(self) -> tuple[str, str] | None:
        """Title and description for the empty states, None when there is a list to show."""
        view = self.view
        if view == PanelView.LOGIN_REQUIRED:
            return "", self._t("bookmark__login_required", "Sign in to see your bookmarks.")
        if view == PanelView.LOAD_ERROR:
            return (
                self._t("bookmark__load_error_title", "Something went wrong"),
                self._t("bookmark__load_error", "Could not load bookmarks."),
            )
        if view == PanelView.NO_RESULTS:
            return (
                self._t("bookmark__no_results_title", "No Results Found"),
                self._t("bookmark__no_results_desc", "Try adjusting your search term."),
            )
        if view == PanelView.NO_BOOKMARKS:
            return (
                self._t("bookmark__no_bookmark_title", "No bookmarks yet"),
                self._t("bookmark__no_bookmark_desc", "Bookmark a verse to find it here."),
            )
        return None
