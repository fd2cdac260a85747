"""Tests for the GraphQL client."""
import json
from collections.abc import AsyncGenerator

import httpx
import pytest
import respx
from httpx import Response

from services.exceptions import UpstreamError
from services.graphql_client import (
    GraphQLClient,
    GraphQLRequest,
    close_graphql_client,
    init_graphql_client,
)

ENDPOINT = "http://hasura.local/v1/graphql"
REQUEST = GraphQLRequest(query="query q { users_bookmarks { id } }", variables={"a": 1})


@pytest.fixture
def mock_api() -> respx.MockRouter:
    """Context manager for mocking GraphQL responses."""
    with respx.mock(assert_all_called=False) as respx_mock:
        yield respx_mock


@pytest.fixture
async def graphql_client(mock_api: respx.MockRouter) -> AsyncGenerator[GraphQLClient]:  # noqa: ARG001
    """GraphQL client created inside the respx context."""
    async with httpx.AsyncClient(timeout=5.0) as http:
        yield GraphQLClient(ENDPOINT, http)


async def test__execute__returns_data(
    mock_api: respx.MockRouter, graphql_client: GraphQLClient,
) -> None:
    """Test that the data object is returned."""
    mock_api.post(ENDPOINT).mock(
        return_value=Response(200, json={"data": {"users_bookmarks": []}}),
    )

    assert await graphql_client.execute(REQUEST, token="t") == {"users_bookmarks": []}


async def test__execute__sends_query_variables_and_bearer(
    mock_api: respx.MockRouter, graphql_client: GraphQLClient,
) -> None:
    """Test the request body and Authorization header."""
    route = mock_api.post(ENDPOINT).mock(return_value=Response(200, json={"data": {}}))

    await graphql_client.execute(REQUEST, token="jwt-123")

    request = route.calls.last.request
    assert request.headers["authorization"] == "Bearer jwt-123"
    assert json.loads(request.content) == {"query": REQUEST.query, "variables": {"a": 1}}


async def test__execute__no_token_sends_no_authorization(
    mock_api: respx.MockRouter, graphql_client: GraphQLClient,
) -> None:
    """Test that anonymous requests carry no Authorization header."""
    route = mock_api.post(ENDPOINT).mock(return_value=Response(200, json={"data": {}}))

    await graphql_client.execute(REQUEST)

    assert "authorization" not in route.calls.last.request.headers


async def test__execute__graphql_errors_raise(
    mock_api: respx.MockRouter, graphql_client: GraphQLClient,
) -> None:
    """Test that an `errors` array is a failure even with status 200."""
    errors = [{"message": "Malformed Authorization header"}]
    mock_api.post(ENDPOINT).mock(return_value=Response(200, json={"errors": errors}))

    with pytest.raises(UpstreamError) as exc_info:
        await graphql_client.execute(REQUEST, token="t")

    assert exc_info.value.errors == errors
    assert "Malformed Authorization header" in str(exc_info.value)


@pytest.mark.parametrize(
    "response",
    [
        Response(500, text="Internal Server Error"),
        Response(200, text="not json"),
        Response(200, json=["unexpected"]),
        Response(200, json={"data": None}),
    ],
)
async def test__execute__bad_responses_raise(
    mock_api: respx.MockRouter, graphql_client: GraphQLClient, response: Response,
) -> None:
    """Test that non-2xx, non-JSON and data-less responses raise UpstreamError."""
    mock_api.post(ENDPOINT).mock(return_value=response)

    with pytest.raises(UpstreamError):
        await graphql_client.execute(REQUEST, token="t")


@pytest.mark.parametrize(
    "error",
    [httpx.ConnectError("refused"), httpx.ReadTimeout("slow"), httpx.ConnectTimeout("slow")],
)
async def test__execute__transport_errors_raise(
    mock_api: respx.MockRouter, graphql_client: GraphQLClient, error: Exception,
) -> None:
    """Test that connection failures and timeouts raise UpstreamError."""
    mock_api.post(ENDPOINT).mock(side_effect=error)

    with pytest.raises(UpstreamError):
        await graphql_client.execute(REQUEST, token="t")


async def test__init_graphql_client__reused_until_closed() -> None:
    """Test that the shared client is created once and recreated after close."""
    await close_graphql_client()
    first = init_graphql_client(ENDPOINT, 10.0)
    assert init_graphql_client(ENDPOINT, 10.0) is first

    await close_graphql_client()
    second = init_graphql_client(ENDPOINT, 10.0)
    assert second is not first
    await close_graphql_client()
