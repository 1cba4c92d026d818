"""In-process remote-call protocol."""

from typing import TYPE_CHECKING, Any

from ..models import CallRequest

if TYPE_CHECKING:
    from ..scene import Scene
    from .host import ServiceHost


class LocalServiceProtocol:
    """Dispatches calls to a ServiceHost in the same process.

    The request still goes through its JSON form, so the handling side sees
    exactly what a network hop would deliver.
    """

    def __init__(self, host: "ServiceHost"):
        self._host = host

    async def call(
        self, scene: "Scene", project: str, service: str, args: list[Any]
    ) -> Any:
        request = CallRequest(
            project=project,
            service=service,
            args=args,
            trace=scene.operation.to_wire(),
        )
        received = CallRequest.model_validate_json(request.model_dump_json())
        return await self._host.dispatch(received)
