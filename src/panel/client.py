"""HTTP client helpers for calling the bookmark endpoints from the panel."""
from typing import Any

import httpx

LIST_PATH = "/api/bookmarks"
MUTATION_PATH = "/api/bookmark"


class BookmarksApiError(Exception):
    """Raised when a bookmark endpoint answers with a non-2xx status or a non-JSON body."""

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"{status_code}: {message}")


def _error_message(response: httpx.Response) -> str:
    """Extract the `error` field from an error response, if any."""
    try:
        body = response.json()
    except ValueError:
        return ""
    if isinstance(body, dict) and isinstance(body.get("error"), str):
        return body["error"]
    return ""


class BookmarksApiClient:
    """
    BookmarksApi over HTTP.

    The session cookie is carried by the httpx client, so requests go out with
    whatever credentials the client was created with.
    """

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def _send(self, request: httpx.Request) -> dict[str, Any]:
        response = await self._client.send(request)
        if response.is_error:
            raise BookmarksApiError(response.status_code, _error_message(response))
        try:
            return response.json()
        except ValueError as e:
            # e.g. a login page served in place of the endpoint
            raise BookmarksApiError(response.status_code, "") from e

    async def list_bookmarks(
        self, author: int | None = None, search_term: str = "",
    ) -> dict[str, Any]:
        """Fetch `{"users_bookmarks": [...]}` for the signed-in user."""
        params: dict[str, Any] = {"searchTerm": search_term}
        if author is not None:
            params["author"] = author
        return await self._send(self._client.build_request("GET", LIST_PATH, params=params))

    async def mutate(self, payload: dict[str, Any]) -> dict[str, Any]:
        """POST an add/remove payload to the mutation endpoint."""
        return await self._send(self._client.build_request("POST", MUTATION_PATH, json=payload))
