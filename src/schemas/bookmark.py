"""Pydantic schemas for bookmark endpoints and the bookmark panel."""
from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class Surah(BaseModel):
    """Surah metadata joined onto a verse."""

    model_config = ConfigDict(extra="ignore")

    id: int
    name: str = ""
    name_en: str = ""


class Translation(BaseModel):
    """A single author's translation of a verse."""

    model_config = ConfigDict(extra="ignore")

    id: int
    author_id: int
    text: str = ""


class Verse(BaseModel):
    """Read-only verse data attached to bookmarks by the list query."""

    model_config = ConfigDict(extra="ignore")

    id: int | None = None
    page: int | None = None
    verse_number: int
    verse: str = ""
    transcription: str = ""
    surah: Surah
    translations: list[Translation] = Field(default_factory=list)


class Bookmark(BaseModel):
    """A saved bookmark as returned in `users_bookmarks`."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    id: int | str
    bookmark_key: str = Field(alias="bookmarkKey")
    type: str | None = None
    bookmark_item: Any = Field(default=None, alias="bookmarkItem")
    verse_id: int | None = Field(default=None, alias="verseId")
    notes: str | None = ""
    labels: list[str] | None = Field(default_factory=list)
    updated_at: datetime | None = None
    verse: Verse | None = None

    @property
    def resolved_verse_id(self) -> int | None:
        """Verse id from the joined verse, falling back to the stored column."""
        if self.verse is not None and self.verse.id is not None:
            return self.verse.id
        return self.verse_id


class BookmarkListResponse(BaseModel):
    """Schema for the list endpoint payload."""

    users_bookmarks: list[Bookmark] = Field(default_factory=list)


class BookmarkMutationRequest(BaseModel):
    """
    Schema for `POST /api/bookmark`.

    Only `action` and `bookmarkKey` are required. `labels` and `notes` fall back
    to empty values on add; `type`, `bookmarkItem` and `verseId` are stored on
    first insert and never updated afterwards.
    """

    model_config = ConfigDict(populate_by_name=True)

    action: Literal["add", "remove"]
    bookmark_key: str = Field(alias="bookmarkKey", min_length=1)
    type: str | None = None
    bookmark_item: Any = Field(default=None, alias="bookmarkItem")
    verse_id: int | None = Field(default=None, alias="verseId")
    labels: list[str] | None = None
    notes: str | None = None
