"""Remote-call protocol over HTTP."""

from typing import TYPE_CHECKING, Any

import httpx

from ..config import rpc_timeout
from ..errors import RemoteCallError
from ..logging_config import get_logger, operation_context
from ..models import CallRequest, CallResponse

if TYPE_CHECKING:
    from ..scene import Scene

logger = get_logger(__name__)


class HttpServiceProtocol:
    """POSTs calls to ``{base_url}/rpc/{service}`` as JSON."""

    def __init__(
        self,
        base_url: str,
        client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout if timeout is not None else rpc_timeout()
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def call(
        self, scene: "Scene", project: str, service: str, args: list[Any]
    ) -> Any:
        """Send one call; transport errors from httpx propagate unchanged."""
        request = CallRequest(
            project=project,
            service=service,
            args=args,
            trace=scene.operation.to_wire(),
        )

        logger.debug(
            "Calling %s.%s",
            project or "<default>",
            service,
            extra={"context": operation_context(scene.operation)},
        )

        response = await self._get_client().post(
            f"{self._base_url}/rpc/{service}",
            content=request.model_dump_json(),
            headers={"Content-Type": "application/json"},
        )

        if response.is_error:
            raise RemoteCallError(service, response.status_code, _error_detail(response))

        return CallResponse.model_validate(response.json()).result

    async def close(self) -> None:
        """Close the HTTP client if this protocol created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict) and "detail" in body:
        return str(body["detail"])
    return response.text
