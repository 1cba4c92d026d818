"""Health API routes."""

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from ...app import IApplication


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str
    services: dict[str, str]


def create_health_router(app: IApplication) -> APIRouter:
    """Create health router."""
    router = APIRouter(prefix="/api", tags=["health"])

    @router.get("/health", response_model=HealthResponse)
    async def get_health() -> dict:
        """Report status and the registered gateways."""
        try:
            services = app.host.services
        except RuntimeError as e:
            raise HTTPException(status_code=503, detail=str(e))
        return {"status": "ok", "services": services}

    return router
