"""Display formatting for bookmark entries."""
from datetime import UTC, datetime

from panel.capabilities import Translator
from schemas.bookmark import Bookmark

TIMESTAMP_FORMAT = "%d.%m.%Y %H:%M:%S"


def surah_name(bookmark: Bookmark, locale: str) -> str:
    """Surah name in the display locale (Turkish name for `tr`, English otherwise)."""
    if bookmark.verse is None:
        return ""
    surah = bookmark.verse.surah
    return surah.name if locale == "tr" else surah.name_en


def verse_line(bookmark: Bookmark, translator: Translator, locale: str) -> str:
    """Heading line for a bookmark, e.g. `1. Al-Fatiha, 1`."""
    if bookmark.verse is None:
        return bookmark.bookmark_key
    return translator(
        "search__translation_verse_line",
        "{surah_id}. {surah_name}, {verse_number}",
        surah_id=bookmark.verse.surah.id,
        surah_name=surah_name(bookmark, locale),
        verse_number=bookmark.verse.verse_number,
    )


def verse_path(bookmark: Bookmark) -> str | None:
    """Route to the verse detail page."""
    if bookmark.verse is None:
        return None
    return f"/{bookmark.verse.surah.id}/{bookmark.verse.verse_number}"


def page_path(bookmark: Bookmark) -> str | None:
    """Route to the mushaf page holding the verse, anchored on the verse."""
    verse = bookmark.verse
    if verse is None or verse.page is None:
        return None
    return f"/page/{verse.page}#{verse.surah.id}:{verse.verse_number}"


def format_timestamp(value: datetime | None) -> str:
    """Absolute timestamp shown as a tooltip, `DD.MM.YYYY HH:mm:ss`."""
    if value is None:
        return ""
    return value.strftime(TIMESTAMP_FORMAT)


def format_time_ago(
    value: datetime | None,
    translator: Translator,
    now: datetime | None = None,
) -> str:
    """
    Compact relative time: `now`, `5m`, `3h`, `2d`, then a plain date.

    Dates in the current year omit the year.
    """
    if value is None:
        return ""
    now = now or datetime.now(UTC)
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)

    seconds = int((now - value).total_seconds())
    if seconds < 60:
        return translator("bookmark__time_now", "now")
    if seconds < 3600:
        return f"{seconds // 60}m"
    if seconds < 86400:
        return f"{seconds // 3600}h"
    if seconds < 7 * 86400:
        return f"{seconds // 86400}d"
    if value.year == now.year:
        return value.strftime("%d.%m")
    return value.strftime("%d.%m.%Y")
