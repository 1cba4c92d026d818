"""Name-based client for remote services."""

from typing import TYPE_CHECKING, Any, Awaitable, Callable

if TYPE_CHECKING:
    from .scene import Scene


class ServiceClient:
    """
    Call-through client for a remote project.

    ``invoke(name, *args)`` is the dispatch primitive. Any public attribute
    resolves to a stub over it, so ``client.place_order(1, 2)`` is
    ``client.invoke("place_order", 1, 2)`` without the client knowing the
    service's method set. A remote method literally named ``invoke`` or
    ``project`` is reachable through ``invoke`` only.
    """

    def __init__(self, scene: "Scene", project: str):
        self._scene = scene
        self._project = project

    @property
    def project(self) -> str:
        return self._project

    async def invoke(self, service: str, *args: Any) -> Any:
        """Call ``service`` on the remote project through the scene."""
        return await self._scene.call_service(service, list(args), self._project)

    def __getattr__(self, name: str) -> Callable[..., Awaitable[Any]]:
        if name.startswith("_"):
            raise AttributeError(name)

        async def stub(*args: Any) -> Any:
            return await self.invoke(name, *args)

        stub.__name__ = name
        stub.__qualname__ = f"{type(self).__name__}.{name}"
        return stub

    def __repr__(self) -> str:
        return f"<ServiceClient project={self._project!r}>"
