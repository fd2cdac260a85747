"""Shared exceptions for service layer operations."""


class UpstreamError(Exception):
    """
    Raised when the GraphQL data service call fails.

    Covers transport failures (connection errors, timeouts, non-2xx responses)
    and GraphQL-level errors returned in the response body. The message is for
    server-side logs only; endpoints answer with a generic error instead.
    """

    def __init__(self, message: str, errors: list[dict] | None = None) -> None:
        self.errors = errors or []
        super().__init__(message)
