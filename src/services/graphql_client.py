"""HTTP client for forwarding GraphQL documents to the bookmark data service."""
import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from services.exceptions import UpstreamError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GraphQLRequest:
    """A GraphQL document and the variables bound to it."""

    query: str
    variables: dict[str, Any] = field(default_factory=dict)
    operation_name: str | None = None

    def to_payload(self) -> dict[str, Any]:
        """Build the JSON body sent to the GraphQL endpoint."""
        payload: dict[str, Any] = {"query": self.query, "variables": self.variables}
        if self.operation_name:
            payload["operationName"] = self.operation_name
        return payload


def _get_headers(token: str | None) -> dict[str, str]:
    """Get common headers for GraphQL requests."""
    headers = {"Content-Type": "application/json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


class GraphQLClient:
    """
    Executes GraphQL requests against a single endpoint.

    Wraps a shared httpx.AsyncClient so connections are reused across requests.
    Every failure mode (transport error, timeout, non-2xx status, GraphQL
    `errors` in the body) is raised as UpstreamError.
    """

    def __init__(self, endpoint: str, http_client: httpx.AsyncClient) -> None:
        self.endpoint = endpoint
        self._http = http_client

    async def execute(self, request: GraphQLRequest, token: str | None = None) -> dict[str, Any]:
        """
        Execute a query or mutation and return its `data` object.

        Args:
            request: Document and variables to send.
            token: Bearer credential forwarded to the data service.

        Raises:
            UpstreamError: If the request fails or the service reports errors.
        """
        try:
            response = await self._http.post(
                self.endpoint,
                json=request.to_payload(),
                headers=_get_headers(token),
            )
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPError as e:
            raise UpstreamError(f"GraphQL request failed: {e!r}") from e
        except ValueError as e:
            raise UpstreamError("GraphQL response was not valid JSON") from e

        if not isinstance(body, dict):
            raise UpstreamError("GraphQL response was not a JSON object")

        errors = body.get("errors")
        if errors:
            messages = "; ".join(
                err.get("message", "unknown error") if isinstance(err, dict) else str(err)
                for err in errors
            )
            raise UpstreamError(f"GraphQL errors: {messages}", errors=errors)

        data = body.get("data")
        if data is None:
            raise UpstreamError("GraphQL response has no data")
        return data

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._http.aclose()


# Module-level client for connection reuse
# Created lazily by get_graphql_client(), closed by close_graphql_client()
_graphql_client: GraphQLClient | None = None


def init_graphql_client(endpoint: str, timeout: float) -> GraphQLClient:
    """Create the shared GraphQL client if it doesn't exist or was closed."""
    global _graphql_client  # noqa: PLW0603
    if _graphql_client is None or _graphql_client._http.is_closed:
        logger.info("Initializing GraphQL client for %s", endpoint)
        _graphql_client = GraphQLClient(
            endpoint,
            httpx.AsyncClient(timeout=timeout),
        )
    return _graphql_client


async def close_graphql_client() -> None:
    """Close the shared GraphQL client on shutdown."""
    global _graphql_client  # noqa: PLW0603
    if _graphql_client is not None:
        await _graphql_client.aclose()
        _graphql_client = None
