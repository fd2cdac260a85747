"""Tests for GraphQL document construction."""
import pytest

from services.bookmark_queries import (
    build_delete_mutation,
    build_list_query,
    build_search_pattern,
    build_upsert_mutation,
)
from services.utils import escape_ilike


class TestBuildSearchPattern:
    """Tests for build_search_pattern."""

    @pytest.mark.parametrize("term", [None, ""])
    def test_empty_term_means_no_filter(self, term: str | None) -> None:
        assert build_search_pattern(term) is None

    def test_term_is_wrapped_in_wildcards(self) -> None:
        assert build_search_pattern("Allah") == "%Allah%"

    def test_like_metacharacters_are_escaped(self) -> None:
        """A literal % or _ in the search box must not act as a wildcard."""
        assert build_search_pattern("100%_sure") == "%100\\%\\_sure%"


class TestEscapeIlike:
    """Tests for escape_ilike."""

    def test_backslash_escaped_first(self) -> None:
        assert escape_ilike("a\\%") == "a\\\\\\%"

    def test_plain_text_unchanged(self) -> None:
        assert escape_ilike("mercy") == "mercy"


class TestBuildListQuery:
    """Tests for build_list_query."""

    def test__no_search_term__no_where_clause(self) -> None:
        request = build_list_query(None, 105)

        assert "where: {\n" not in request.query
        assert "_or" not in request.query
        assert "$search" not in request.query
        assert request.variables == {"authorId": 105}

    def test__empty_search_term__identical_to_none(self) -> None:
        assert build_list_query("", 105) == build_list_query(None, 105)

    def test__search_term__or_over_five_fields(self) -> None:
        request = build_list_query("Allah", 105)

        assert request.variables == {"authorId": 105, "search": "%Allah%"}
        assert "$search: String!" in request.query
        assert "_or: [" in request.query
        assert request.query.count("_ilike: $search") == 5
        assert "{ notes: { _ilike: $search } }" in request.query
        assert "{ labels: { _cast: { String: { _ilike: $search } } } }" in request.query
        assert "{ verse: { verse: { _ilike: $search } } }" in request.query
        assert "{ verse: { transcription: { _ilike: $search } } }" in request.query
        assert "{ verse: { translations: { text: { _ilike: $search } } } }" in request.query

    def test__search_term__never_interpolated(self) -> None:
        """Hostile input stays in variables and never reaches the document."""
        term = '" } } ] } ) { id } delete_users_bookmarks(where: {}) { affected_rows'
        request = build_list_query(term, 105)

        assert "delete_users_bookmarks" not in request.query
        assert request.query == build_list_query("anything", 105).query

    def test__document_shape(self) -> None:
        request = build_list_query(None, 7)

        assert request.operation_name == "usersBookmarksQuery"
        assert "order_by: { updated_at: desc }" in request.query
        assert "translations(where: { author_id: { _eq: $authorId } })" in request.query
        for field in ("bookmarkKey", "bookmarkItem", "updated_at", "notes", "labels", "verseId"):
            assert field in request.query

    def test__payload(self) -> None:
        payload = build_list_query("x", 1).to_payload()

        assert set(payload) == {"query", "variables", "operationName"}
        assert payload["operationName"] == "usersBookmarksQuery"


class TestMutations:
    """Tests for the upsert/delete mutation pair."""

    def test__upsert__defaults(self) -> None:
        request = build_upsert_mutation(user_id="u1", bookmark_key="1:1")

        assert request.variables == {
            "userId": "u1",
            "type": None,
            "bookmarkItem": None,
            "bookmarkKey": "1:1",
            "verseId": None,
            "labels": [],
            "notes": "",
        }

    def test__upsert__keeps_empty_values_given(self) -> None:
        request = build_upsert_mutation(user_id="u1", bookmark_key="1:1", labels=[], notes="")

        assert request.variables["labels"] == []
        assert request.variables["notes"] == ""

    def test__upsert__only_mutable_columns_updated_on_conflict(self) -> None:
        query = build_upsert_mutation(user_id="u1", bookmark_key="1:1").query

        assert "on_conflict" in query
        assert "constraint: users_bookmarks_userId_bookmarkKey_key" in query
        assert "update_columns: [updated_at, labels, notes]" in query
        assert 'updated_at: "now()"' in query

    def test__delete(self) -> None:
        request = build_delete_mutation("u1", "2:255")

        assert "delete_users_bookmarks" in request.query
        assert "affected_rows" in request.query
        assert request.variables == {"userId": "u1", "bookmarkKey": "2:255"}
