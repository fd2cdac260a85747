"""FastAPI application entry point."""
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from api.routers import bookmarks, health
from core.auth import UnauthorizedError
from core.config import get_settings
from services.graphql_client import close_graphql_client, init_graphql_client


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None]:
    """Manage application lifespan - startup and shutdown."""
    app_settings = get_settings()

    # Startup: open the shared GraphQL client
    init_graphql_client(app_settings.hasura_api_endpoint, app_settings.upstream_timeout)

    yield

    # Shutdown: close it
    await close_graphql_client()


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint,
    ) -> Response:
        """Process request and add security headers to response."""
        response = await call_next(request)
        # Prevent MIME type sniffing
        response.headers["X-Content-Type-Options"] = "nosniff"
        # Prevent clickjacking - API shouldn't be framed
        response.headers["X-Frame-Options"] = "DENY"
        # Bookmark payloads are per-user
        response.headers["Cache-Control"] = "no-store"
        return response


app_settings = get_settings()

app = FastAPI(
    title="Verse Bookmarks API",
    description="Saved verse bookmarks with notes and labels, backed by a GraphQL data service.",
    version="0.1.0",
    lifespan=lifespan,
)


@app.exception_handler(UnauthorizedError)
async def unauthorized_exception_handler(
    _request: Request, exc: UnauthorizedError,
) -> JSONResponse:
    """Answer 401 with the reason in an `error` field."""
    return JSONResponse(
        status_code=401,
        content={"error": exc.message},
        headers={"WWW-Authenticate": "Bearer"},
    )


# Security headers middleware (runs after CORS, adds headers to responses)
app.add_middleware(SecurityHeadersMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=app_settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(bookmarks.router)
