"""FastAPI dependencies for injection."""
from fastapi import Depends

from core.auth import AuthContext, get_authenticator, get_current_auth
from core.config import Settings, get_settings
from services.graphql_client import GraphQLClient, init_graphql_client


def get_graphql_client(settings: Settings = Depends(get_settings)) -> GraphQLClient:
    """
    Get the shared GraphQL client.

    Created on first use so the app works under transports that skip lifespan
    events (e.g. httpx.ASGITransport in tests).
    """
    return init_graphql_client(settings.hasura_api_endpoint, settings.upstream_timeout)


__all__ = [
    "AuthContext",
    "get_authenticator",
    "get_current_auth",
    "get_graphql_client",
    "get_settings",
]
