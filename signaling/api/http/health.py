"""Health check endpoint for monitoring service status."""

from fastapi import APIRouter, status
from pydantic import BaseModel

from signaling.managers.connection_registry import connection_registry

router = APIRouter()


class HealthResponse(BaseModel):
    """Response model for health check endpoint."""

    status: str
    active_connections: int


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Health check endpoint",
    tags=["health"],
)
async def health_check() -> HealthResponse:
    """
    Report service status and the number of registered connections.

    The relay has no external dependencies, so it is healthy whenever it
    can answer.
    """
    return HealthResponse(
        status="healthy",
        active_connections=await connection_registry.count(),
    )
