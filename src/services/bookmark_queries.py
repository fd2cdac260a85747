"""
GraphQL documents for the `users_bookmarks` table.

All user-supplied values travel as typed variables. The only thing that varies
in the document text itself is whether the `where` filter is present, which
depends on whether a search term was given, never on its contents.
"""
from typing import Any

from services.graphql_client import GraphQLRequest
from services.utils import escape_ilike

# Unique constraint backing upsert-on-conflict for (userId, bookmarkKey)
BOOKMARK_KEY_CONSTRAINT = "users_bookmarks_userId_bookmarkKey_key"

# Columns an add may overwrite on an existing bookmark; type, bookmarkItem
# and verseId are fixed at first insert
UPSERT_UPDATE_COLUMNS = ("updated_at", "labels", "notes")

# Fields searched by the list query, each matched with `_ilike: $search`
SEARCH_CONDITIONS = (
    "{ notes: { _ilike: $search } }",
    "{ labels: { _cast: { String: { _ilike: $search } } } }",
    "{ verse: { verse: { _ilike: $search } } }",
    "{ verse: { transcription: { _ilike: $search } } }",
    "{ verse: { translations: { text: { _ilike: $search } } } }",
)

BOOKMARK_FIELDS = """
    id
    bookmarkKey
    bookmarkItem
    type
    verseId
    updated_at
    notes
    labels
    verse {
      id
      page
      surah {
        id
        name
        name_en
      }
      verse_number
      verse
      transcription
      translations(where: { author_id: { _eq: $authorId } }) {
        id
        author_id
        text
      }
    }
"""


def build_search_pattern(search_term: str | None) -> str | None:
    """
    Turn a search term into a substring ILIKE pattern.

    Returns None for an absent or empty term, meaning "no filter".
    """
    if not search_term:
        return None
    return f"%{escape_ilike(search_term)}%"


def build_search_filter() -> str:
    """Build the `where` argument: an OR over every searchable field."""
    conditions = ",\n        ".join(SEARCH_CONDITIONS)
    return f"where: {{\n      _or: [\n        {conditions}\n      ]\n    }}"


def build_list_query(search_term: str | None, author_id: int) -> GraphQLRequest:
    """
    Build the query listing the current user's bookmarks, newest-updated first.

    Args:
        search_term: Optional free text matched case-insensitively against notes,
            labels, verse text, transcription and translation text.
        author_id: Translation author whose translation is joined onto each verse.

    Returns:
        GraphQLRequest with no `where` clause when search_term is empty.
    """
    pattern = build_search_pattern(search_term)
    variables: dict[str, Any] = {"authorId": author_id}

    if pattern is None:
        declarations = "$authorId: Int!"
        arguments = "order_by: { updated_at: desc }"
    else:
        declarations = "$authorId: Int!, $search: String!"
        arguments = f"order_by: {{ updated_at: desc }}\n    {build_search_filter()}"
        variables["search"] = pattern

    query = (
        f"query usersBookmarksQuery({declarations}) {{\n"
        f"  users_bookmarks(\n    {arguments}\n  ) {{{BOOKMARK_FIELDS}  }}\n"
        "}\n"
    )
    return GraphQLRequest(query=query, variables=variables, operation_name="usersBookmarksQuery")


UPSERT_BOOKMARK_MUTATION = f"""
mutation upsertBookmark(
  $userId: String!
  $type: String
  $bookmarkItem: jsonb
  $bookmarkKey: String!
  $verseId: Int
  $labels: jsonb
  $notes: String
) {{
  insert_users_bookmarks_one(
    object: {{
      userId: $userId
      type: $type
      bookmarkItem: $bookmarkItem
      bookmarkKey: $bookmarkKey
      verseId: $verseId
      labels: $labels
      notes: $notes
      updated_at: "now()"
    }}
    on_conflict: {{
      constraint: {BOOKMARK_KEY_CONSTRAINT}
      update_columns: [{', '.join(UPSERT_UPDATE_COLUMNS)}]
    }}
  ) {{
    id
    bookmarkKey
    labels
    notes
    updated_at
  }}
}}
"""

DELETE_BOOKMARK_MUTATION = """
mutation deleteBookmark($userId: String!, $bookmarkKey: String!) {
  delete_users_bookmarks(
    where: { userId: { _eq: $userId }, bookmarkKey: { _eq: $bookmarkKey } }
  ) {
    affected_rows
  }
}
"""


def build_upsert_mutation(
    user_id: str,
    bookmark_key: str,
    bookmark_type: str | None = None,
    bookmark_item: Any = None,
    verse_id: int | None = None,
    labels: list[str] | None = None,
    notes: str | None = None,
) -> GraphQLRequest:
    """
    Build the add/update mutation for a bookmark.

    Missing labels and notes default to [] and "".
    """
    return GraphQLRequest(
        query=UPSERT_BOOKMARK_MUTATION,
        variables={
            "userId": user_id,
            "type": bookmark_type,
            "bookmarkItem": bookmark_item,
            "bookmarkKey": bookmark_key,
            "verseId": verse_id,
            "labels": labels if labels is not None else [],
            "notes": notes if notes is not None else "",
        },
        operation_name="upsertBookmark",
    )


def build_delete_mutation(user_id: str, bookmark_key: str) -> GraphQLRequest:
    """Build the mutation removing the user's bookmark with the given key."""
    return GraphQLRequest(
        query=DELETE_BOOKMARK_MUTATION,
        variables={"userId": user_id, "bookmarkKey": bookmark_key},
        operation_name="deleteBookmark",
    )
