"""Application bootstrap and lifecycle management."""

import importlib
import os
from typing import Any, Protocol

from .config import parse_service_specs, resolve_db_path
from .logging_config import get_logger
from .rpc import ServiceHost
from .storage import IDatabase, SqliteDatabase

logger = get_logger(__name__)


class IApplication(Protocol):
    """Bootstrap and lifecycle."""

    async def start(self) -> None:
        """Initialize components in dependency order."""
        ...

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        ...

    @property
    def host(self) -> ServiceHost:
        """Service host dispatching incoming calls."""
        ...


def load_gateway(target: str) -> Any:
    """Import ``package.module:attr`` and instantiate it when it is a class."""
    module_name, _, attr = target.partition(":")
    gateway = getattr(importlib.import_module(module_name), attr)
    return gateway() if isinstance(gateway, type) else gateway


class Application:
    """Hosts gateway services over one database."""

    def __init__(
        self,
        db_path: str | None = None,
        schema: str | None = None,
        services: dict[str, Any] | None = None,
    ):
        env_db_path = os.getenv("DATABASE_URL") if db_path is None else db_path
        self._db_path = resolve_db_path(env_db_path)
        self._schema = schema
        self._pending: dict[str, Any] = dict(services or {})

        # Components (will be initialized in start())
        self._database: SqliteDatabase | None = None
        self._host: ServiceHost | None = None

    async def start(self) -> None:
        """Initialize components in dependency order."""
        logger.info("Starting application")

        # 1. Database (no dependencies)
        self._database = SqliteDatabase(self._db_path)
        await self._database.init(self._schema)
        logger.info("Database initialized")

        # 2. ServiceHost (depends on Database)
        self._host = ServiceHost(self._database)

        # 3. Gateways from SCENE_SERVICES, then ones passed in code
        for project, target in parse_service_specs(os.getenv("SCENE_SERVICES")).items():
            self._host.register(project, load_gateway(target))
        for project, gateway in self._pending.items():
            self._host.register(project, gateway)

        logger.info("All components initialized successfully")

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        self._host = None
        if self._database:
            await self._database.close()
            self._database = None
            logger.info("Database closed")

    def register_service(self, project: str, gateway: Any) -> None:
        """Serve ``gateway`` for ``project`` (now, or once started)."""
        self._pending[project] = gateway
        if self._host:
            self._host.register(project, gateway)

    @property
    def database(self) -> IDatabase:
        """Get database instance."""
        if not self._database:
            raise RuntimeError("Application not started")
        return self._database

    @property
    def host(self) -> ServiceHost:
        """Get service host instance."""
        if not self._host:
            raise RuntimeError("Application not started")
        return self._host
