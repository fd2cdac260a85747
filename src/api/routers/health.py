"""Health check endpoints."""
import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from api.dependencies import get_graphql_client
from services.exceptions import UpstreamError
from services.graphql_client import GraphQLClient, GraphQLRequest

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])

PROBE_QUERY = GraphQLRequest(query="query healthProbe { __typename }")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    upstream: str


@router.get("/health", response_model=HealthResponse)
async def health_check(
    client: GraphQLClient = Depends(get_graphql_client),
) -> HealthResponse:
    """Check application and GraphQL data service health."""
    upstream_status = "healthy"
    try:
        await client.execute(PROBE_QUERY)
    except UpstreamError:
        logger.exception("GraphQL health check failed")
        upstream_status = "unhealthy"

    return HealthResponse(
        status="healthy" if upstream_status == "healthy" else "degraded",
        upstream=upstream_status,
    )
