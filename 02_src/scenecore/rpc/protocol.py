"""Remote-call port."""

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from ..scene import Scene


class IServiceProtocol(Protocol):
    """Remote method invocation."""

    async def call(
        self, scene: "Scene", project: str, service: str, args: list[Any]
    ) -> Any:
        """Invoke ``service`` of ``project`` with positional ``args``."""
        ...
