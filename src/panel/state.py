"""
Pure state transitions for the bookmark panel.

The server owns bookmarks; the panel keeps an in-memory copy of the last list
it loaded and patches it after each successful mutation instead of reloading.
All of that patching goes through `reduce_bookmarks`.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum

from schemas.bookmark import Bookmark


@dataclass(frozen=True)
class ListLoaded:
    """A list fetch completed; its result replaces the current list."""

    bookmarks: list[Bookmark]


@dataclass(frozen=True)
class ItemSaved:
    """An edit was saved; notes, labels and updated_at change on one bookmark."""

    bookmark_id: int | str
    notes: str
    labels: list[str]
    updated_at: datetime


@dataclass(frozen=True)
class ItemRemoved:
    """A bookmark was deleted."""

    bookmark_key: str


BookmarkEvent = ListLoaded | ItemSaved | ItemRemoved


def reduce_bookmarks(bookmarks: list[Bookmark], event: BookmarkEvent) -> list[Bookmark]:
    """
    Apply an event to the bookmark list, returning a new list.

    Order is preserved for saves and removals; a save for an unknown id and a
    removal of an unknown key leave the list unchanged.
    """
    if isinstance(event, ListLoaded):
        return list(event.bookmarks)

    if isinstance(event, ItemSaved):
        return [
            bookmark.model_copy(
                update={
                    "notes": event.notes,
                    "labels": list(event.labels),
                    "updated_at": event.updated_at,
                },
            )
            if bookmark.id == event.bookmark_id
            else bookmark
            for bookmark in bookmarks
        ]

    if isinstance(event, ItemRemoved):
        return [b for b in bookmarks if b.bookmark_key != event.bookmark_key]

    raise TypeError(f"Unknown bookmark event: {event!r}")


@dataclass
class EditDraft:
    """Unsaved notes and labels for a bookmark in edit mode."""

    notes: str = ""
    labels: list[str] = field(default_factory=list)

    @classmethod
    def from_bookmark(cls, bookmark: Bookmark) -> "EditDraft":
        """Seed a draft from the bookmark's current values."""
        return cls(notes=bookmark.notes or "", labels=list(bookmark.labels or []))


class PanelView(StrEnum):
    """What the panel shows in place of (or as) the list."""

    LOGIN_REQUIRED = "login_required"
    LOADING = "loading"
    LOAD_ERROR = "load_error"
    NO_RESULTS = "no_results"
    NO_BOOKMARKS = "no_bookmarks"
    LIST = "list"


def resolve_view(
    *,
    signed_in: bool,
    is_loading: bool,
    load_failed: bool,
    search_term: str,
    bookmark_count: int,
) -> PanelView:
    """
    Pick the panel view.

    Precedence: login required > loading > load error > no search results >
    no bookmarks at all > the list.
    """
    if not signed_in:
        return PanelView.LOGIN_REQUIRED
    if is_loading:
        return PanelView.LOADING
    if load_failed:
        return PanelView.LOAD_ERROR
    if bookmark_count:
        return PanelView.LIST
    if search_term:
        return PanelView.NO_RESULTS
    return PanelView.NO_BOOKMARKS
