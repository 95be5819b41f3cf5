"""Health API routes."""

from fastapi import APIRouter
from pydantic import BaseModel

from ...app import IApplication


class HealthResponse(BaseModel):
    """Response model for health."""

    status: str
    inFlight: int


def create_health_router(app: IApplication) -> APIRouter:
    """Create health router."""
    router = APIRouter(prefix="/api/qaku/v1", tags=["health"])

    @router.get("/health", response_model=HealthResponse)
    async def health() -> dict:
        """Liveness and number of running pipeline executions."""
        return {"status": "ok", "inFlight": app.dispatcher.in_flight}

    return router
