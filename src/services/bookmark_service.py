"""Service layer for bookmark operations proxied to the GraphQL data service."""
import logging
from typing import Any

from schemas.bookmark import BookmarkMutationRequest
from services.bookmark_queries import (
    build_delete_mutation,
    build_list_query,
    build_upsert_mutation,
)
from services.graphql_client import GraphQLClient

logger = logging.getLogger(__name__)


async def list_bookmarks(
    client: GraphQLClient,
    token: str,
    author_id: int,
    search_term: str | None = None,
) -> dict[str, Any]:
    """
    Fetch the signed-in user's bookmarks, newest-updated first.

    Row-level scoping to the user is enforced by the data service from the
    bearer token; the query itself carries no user id.

    Raises:
        UpstreamError: If the data service call fails.
    """
    request = build_list_query(search_term, author_id)
    logger.debug("Listing bookmarks (author=%s, filtered=%s)", author_id, bool(search_term))
    return await client.execute(request, token=token)


async def add_bookmark(
    client: GraphQLClient,
    token: str,
    user_id: str,
    data: BookmarkMutationRequest,
) -> dict[str, Any]:
    """
    Insert a bookmark, or update labels/notes/updated_at if the key already exists.

    Raises:
        UpstreamError: If the data service call fails.
    """
    request = build_upsert_mutation(
        user_id=user_id,
        bookmark_key=data.bookmark_key,
        bookmark_type=data.type,
        bookmark_item=data.bookmark_item,
        verse_id=data.verse_id,
        labels=data.labels,
        notes=data.notes,
    )
    return await client.execute(request, token=token)


async def remove_bookmark(
    client: GraphQLClient,
    token: str,
    user_id: str,
    bookmark_key: str,
) -> dict[str, Any]:
    """
    Delete the user's bookmark with the given key.

    Returns the data service result, including `affected_rows`.

    Raises:
        UpstreamError: If the data service call fails.
    """
    return await client.execute(build_delete_mutation(user_id, bookmark_key), token=token)
