"""Bookmark endpoints proxied to the GraphQL data service."""
import logging
from typing import Any

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from api.dependencies import AuthContext, get_current_auth, get_graphql_client, get_settings
from core.config import Settings
from schemas.bookmark import BookmarkMutationRequest
from services import bookmark_service
from services.exceptions import UpstreamError
from services.graphql_client import GraphQLClient

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["bookmarks"])

LIST_ERROR_MESSAGE = "Error while fetching bookmarks"
MUTATION_ERROR_MESSAGE = "Error while adding/removing bookmark"


@router.get("/bookmarks", response_model=None)
async def list_bookmarks(
    author: int | None = Query(default=None, description="Translation author to join onto each verse"),  # noqa: E501
    search_term: str | None = Query(
        default=None,
        alias="searchTerm",
        description="Case-insensitive search across notes, labels, verse text, transcription and translation",  # noqa: E501
    ),
    auth: AuthContext = Depends(get_current_auth),
    client: GraphQLClient = Depends(get_graphql_client),
    settings: Settings = Depends(get_settings),
) -> dict[str, Any] | JSONResponse:
    """
    List the signed-in user's bookmarks, newest-updated first.

    Returns the data service payload unchanged (`{"users_bookmarks": [...]}`).
    An empty searchTerm is treated the same as no searchTerm.
    """
    author_id = author if author is not None else settings.default_author_id
    try:
        return await bookmark_service.list_bookmarks(
            client,
            auth.token,
            author_id=author_id,
            search_term=search_term,
        )
    except UpstreamError:
        logger.exception("Failed to list bookmarks for user %s", auth.user_id)
        return JSONResponse(status_code=500, content={"error": LIST_ERROR_MESSAGE})


@router.post("/bookmark", response_model=None)
async def mutate_bookmark(
    data: BookmarkMutationRequest,
    auth: AuthContext = Depends(get_current_auth),
    client: GraphQLClient = Depends(get_graphql_client),
) -> dict[str, Any] | JSONResponse:
    """
    Add (upsert) or remove a bookmark.

    - **add**: inserts the bookmark; an existing bookmarkKey only has its labels,
      notes and updated_at replaced
    - **remove**: deletes the bookmark with this bookmarkKey
    """
    try:
        if data.action == "add":
            return await bookmark_service.add_bookmark(client, auth.token, auth.user_id, data)
        return await bookmark_service.remove_bookmark(
            client, auth.token, auth.user_id, data.bookmark_key,
        )
    except UpstreamError:
        logger.exception(
            "Failed to %s bookmark %s for user %s", data.action, data.bookmark_key, auth.user_id,
        )
        return JSONResponse(status_code=500, content={"error": MUTATION_ERROR_MESSAGE})
