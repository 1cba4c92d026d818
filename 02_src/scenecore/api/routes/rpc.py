"""Remote call routes."""

from typing import Any

from fastapi import APIRouter, HTTPException

from ...app import IApplication
from ...errors import ServiceNotFoundError
from ...logging_config import get_logger
from ...models import CallRequest, CallResponse

logger = get_logger(__name__)


def create_rpc_router(app: IApplication) -> APIRouter:
    """Create remote call router."""
    router = APIRouter(prefix="/rpc", tags=["rpc"])

    @router.post("/{service}", response_model=CallResponse)
    async def call_service(service: str, request: CallRequest) -> dict[str, Any]:
        """Dispatch one call to the gateway registered for its project."""
        if request.service != service:
            raise HTTPException(
                status_code=400, detail="Service in path and body differ"
            )

        try:
            result = await app.host.dispatch(request)
        except ServiceNotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e))
        except Exception as e:
            logger.exception("Service %s failed", service)
            raise HTTPException(status_code=500, detail=str(e))

        return {"result": result}

    return router
