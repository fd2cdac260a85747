"""
Session authentication for the bookmark endpoints.

Sessions are issued by an external identity provider as HS256-signed JWTs and
arrive either in the session cookie or in an `Authorization: Bearer` header.
The same raw token is forwarded to the GraphQL service as the bearer credential,
so the endpoints consult the provider twice: once for the session (who is the
user) and once for the token (what to forward). Either lookup failing is a 401.
"""
import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol

import jwt
from fastapi import Depends, Request

from core.config import Settings, get_settings

logger = logging.getLogger(__name__)

SIGN_IN_REQUIRED_MESSAGE = "You must be signed in to view the protected content on this page."
INVALID_TOKEN_MESSAGE = "Unable to verify session token."

# Cookie prefix the identity provider uses when served over HTTPS
SECURE_COOKIE_PREFIX = "__Secure-"


class UnauthorizedError(Exception):
    """Raised when a request has no session or no usable session token."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


@dataclass(frozen=True)
class SessionUser:
    """Identity of the signed-in user."""

    id: str
    email: str | None = None
    name: str | None = None


@dataclass(frozen=True)
class Session:
    """An authenticated session."""

    user: SessionUser
    expires: datetime | None = None


class RequestAuthenticator(Protocol):
    """Looks up the session and bearer token for an incoming request."""

    async def get_session(self, request: Request) -> Session | None:
        """Return the current session, or None when the request is anonymous."""
        ...

    async def get_token(self, request: Request) -> str | None:
        """Return the raw bearer token for the request, or None if it can't be derived."""
        ...


class JwtSessionAuthenticator:
    """RequestAuthenticator backed by HS256 session JWTs signed with a shared secret."""

    algorithms = ("HS256",)

    def __init__(self, settings: Settings) -> None:
        self._secret = settings.nextauth_secret
        self._cookie_name = settings.session_cookie_name

    def _raw_token(self, request: Request) -> str | None:
        """Extract the session token from the cookie, falling back to the Authorization header."""
        token = (
            request.cookies.get(self._cookie_name)
            or request.cookies.get(SECURE_COOKIE_PREFIX + self._cookie_name)
        )
        if token:
            return token

        scheme, _, credentials = request.headers.get("Authorization", "").partition(" ")
        if scheme.lower() == "bearer" and credentials.strip():
            return credentials.strip()
        return None

    def _decode(self, token: str) -> dict | None:
        """Verify the token signature and expiry, returning its claims."""
        if not self._secret:
            logger.warning("NEXTAUTH_SECRET is not configured; rejecting session token")
            return None
        try:
            return jwt.decode(token, self._secret, algorithms=list(self.algorithms))
        except jwt.ExpiredSignatureError:
            logger.info("Session token has expired")
            return None
        except jwt.PyJWTError as e:
            logger.warning("Session token validation failed: %s", e)
            return None

    async def get_session(self, request: Request) -> Session | None:
        """Decode the session token into a Session."""
        token = self._raw_token(request)
        if not token:
            return None

        claims = self._decode(token)
        if claims is None:
            return None

        user_id = claims.get("sub") or claims.get("id")
        if not user_id:
            return None

        expires = None
        if "exp" in claims:
            expires = datetime.fromtimestamp(claims["exp"], tz=UTC)

        return Session(
            user=SessionUser(
                id=str(user_id),
                email=claims.get("email"),
                name=claims.get("name"),
            ),
            expires=expires,
        )

    async def get_token(self, request: Request) -> str | None:
        """Return the raw session token if it verifies."""
        token = self._raw_token(request)
        if not token or self._decode(token) is None:
            return None
        return token


@dataclass(frozen=True)
class AuthContext:
    """Session and bearer token resolved for an authenticated request."""

    session: Session
    token: str

    @property
    def user_id(self) -> str:
        """Identifier of the signed-in user."""
        return self.session.user.id


def get_authenticator(settings: Settings = Depends(get_settings)) -> RequestAuthenticator:
    """Get the request authenticator (overridden in tests)."""
    return JwtSessionAuthenticator(settings)


async def get_current_auth(
    request: Request,
    authenticator: RequestAuthenticator = Depends(get_authenticator),
) -> AuthContext:
    """
    Require a session and a derivable bearer token.

    Raises:
        UnauthorizedError: If there is no session, or the session token can't be derived.
    """
    session = await authenticator.get_session(request)
    if session is None:
        raise UnauthorizedError(SIGN_IN_REQUIRED_MESSAGE)

    token = await authenticator.get_token(request)
    if not token:
        raise UnauthorizedError(INVALID_TOKEN_MESSAGE)

    return AuthContext(session=session, token=token)
