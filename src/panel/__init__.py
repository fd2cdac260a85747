"""Bookmark panel: client-side state and behavior of the bookmarks modal."""

from .bookmark_panel import BookmarkEntry, BookmarkPanel
from .client import BookmarksApiClient, BookmarksApiError
from .state import PanelView

__all__ = [
    "BookmarkEntry",
    "BookmarkPanel",
    "BookmarksApiClient",
    "BookmarksApiError",
    "PanelView",
]
