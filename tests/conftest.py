"""Pytest fixtures for testing."""
import os

# Settings are read when api.main is imported; set them before any app import
os.environ.setdefault("HASURA_API_ENDPOINT", "http://hasura.test/v1/graphql")
os.environ.setdefault("NEXTAUTH_SECRET", "test-secret")

from collections.abc import AsyncGenerator  # noqa: E402

import pytest  # noqa: E402
import respx  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from starlette.requests import Request  # noqa: E402

from core.auth import Session, SessionUser  # noqa: E402
from services.graphql_client import close_graphql_client  # noqa: E402

HASURA_ENDPOINT = os.environ["HASURA_API_ENDPOINT"]
TEST_USER_ID = "user-123"
TEST_TOKEN = "mock-jwt-token"


class FakeAuthenticator:
    """RequestAuthenticator returning a fixed session and token."""

    def __init__(self, session: Session | None, token: str | None) -> None:
        self.session = session
        self.token = token

    async def get_session(self, request: Request) -> Session | None:  # noqa: ARG002
        return self.session

    async def get_token(self, request: Request) -> str | None:  # noqa: ARG002
        return self.token


@pytest.fixture
def authenticator() -> FakeAuthenticator:
    """Signed-in user with a derivable token; tests clear either to simulate failures."""
    return FakeAuthenticator(
        session=Session(user=SessionUser(id=TEST_USER_ID)),
        token=TEST_TOKEN,
    )


@pytest.fixture
async def upstream() -> AsyncGenerator[respx.MockRouter]:
    """Mock the GraphQL data service."""
    # Reset the shared GraphQL client so it is created inside the respx context
    await close_graphql_client()
    with respx.mock(assert_all_called=False) as respx_mock:
        yield respx_mock
    await close_graphql_client()


@pytest.fixture
async def client(
    authenticator: FakeAuthenticator,
    upstream: respx.MockRouter,  # noqa: ARG001
) -> AsyncGenerator[AsyncClient]:
    """Create a test client with the authenticator override."""
    from api.main import app
    from core.auth import get_authenticator

    app.dependency_overrides[get_authenticator] = lambda: authenticator

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as test_client:
        yield test_client

    app.dependency_overrides.clear()
