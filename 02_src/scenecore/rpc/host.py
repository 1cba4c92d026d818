"""Receiving side of remote calls: maps project/service to gateway methods."""

import inspect
from typing import Any, Callable

from ..errors import ServiceNotFoundError
from ..logging_config import get_logger, operation_context
from ..models import CallRequest, Operation
from ..scene import Scene
from ..storage import IDatabase
from .local import LocalServiceProtocol
from .protocol import IServiceProtocol

logger = get_logger(__name__)


class ServiceHost:
    """
    Dispatches incoming calls to registered gateway objects.

    A gateway is any object whose public methods take the handling ``Scene``
    as their first argument, followed by the call's positional args.
    """

    def __init__(
        self,
        database: IDatabase,
        service_protocol: IServiceProtocol | None = None,
    ):
        self._database = database
        if service_protocol is None:
            service_protocol = LocalServiceProtocol(self)
        self._service_protocol = service_protocol
        self._gateways: dict[str, Any] = {}

    def register(self, project: str, gateway: Any) -> None:
        """Register the gateway serving ``project``."""
        self._gateways[project] = gateway
        logger.info("Registered gateway %s for project %r", type(gateway).__name__, project)

    def unregister(self, project: str) -> None:
        self._gateways.pop(project, None)

    @property
    def services(self) -> dict[str, str]:
        """Project -> gateway class name."""
        return {project: type(gw).__name__ for project, gw in self._gateways.items()}

    def resolve(self, project: str, service: str) -> Callable[..., Any]:
        """Find the bound gateway method for a call."""
        gateway = self._gateways.get(project)
        if gateway is None or service.startswith("_"):
            raise ServiceNotFoundError(project, service)

        method = getattr(gateway, service, None)
        if not callable(method):
            raise ServiceNotFoundError(project, service)
        return method

    async def dispatch(self, request: CallRequest) -> Any:
        """Rebuild the caller's operation, open a scene for it and run the method."""
        method = self.resolve(request.project, request.service)
        operation = Operation.from_wire(request.trace)
        scene = Scene(
            operation,
            database=self._database,
            service_protocol=self._service_protocol,
            project=request.project,
        )

        logger.info(
            "Dispatching %s.%s",
            request.project or "<default>",
            request.service,
            extra={"context": operation_context(operation)},
        )

        result = method(scene, *request.args)
        if inspect.isawaitable(result):
            result = await result
        return result
