"""Scene: per-flow execution context."""

import asyncio
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Coroutine, Iterator, Sequence

from ..config import get_current_project
from ..errors import MultipleMatchesError, NotFoundError
from ..logging_config import get_logger, operation_context
from ..models import ActiveRecord, Operation, is_active_record
from .services import ServiceClient
from .subscribers import ISubscriber, SubscriberSet

if TYPE_CHECKING:
    from ..rpc import IServiceProtocol
    from ..storage import IDatabase

logger = get_logger(__name__)

SqlView = Callable[["Scene", Any], Awaitable[Any]]


def _no_change(resource_name: str) -> None:
    return None


class Scene:
    """
    Context of one independent asynchronous flow.

    A server opens one scene per handled request and registers no
    subscribers. A reactive client opens one per read pass, where subscribers
    capture which tables were read, and one per write pass, where
    ``notify_change`` announces which tables changed.
    """

    def __init__(
        self,
        operation: Operation,
        database: "IDatabase",
        service_protocol: "IServiceProtocol",
        project: str | None = None,
    ):
        self._operation = operation
        self._database = database
        self._service_protocol = service_protocol
        self._project = get_current_project() if project is None else project
        self.subscribers = SubscriberSet()
        self.notify_change: Callable[[str], None] = _no_change
        self._last_reported: Exception | None = None

    # The operation and ports are fixed for the scene's lifetime
    @property
    def operation(self) -> Operation:
        return self._operation

    @property
    def database(self) -> "IDatabase":
        return self._database

    @property
    def service_protocol(self) -> "IServiceProtocol":
        return self._service_protocol

    @property
    def project(self) -> str:
        """Default target project for remote calls."""
        return self._project

    def _log_context(self) -> dict:
        return {"context": operation_context(self._operation)}

    def _report_error(self, action: str, error: Exception) -> None:
        self._last_reported = error
        logger.error("%s failed: %s", action, error, extra=self._log_context())
        on_error = self._operation.on_error
        if on_error is None:
            return
        try:
            on_error(error)
        except Exception:
            logger.exception("on_error hook failed", extra=self._log_context())

    @contextmanager
    def _reporting(self, action: str) -> Iterator[None]:
        try:
            yield
        except Exception as e:
            # A view calling back into the scene has already reported its failure
            if e is not self._last_reported:
                self._report_error(action, e)
            raise

    # Subscriptions
    def add_subscriber(self, subscriber: ISubscriber) -> None:
        self.subscribers.add(subscriber)

    def remove_subscriber(self, subscriber: ISubscriber) -> None:
        self.subscribers.discard(subscriber)

    def subscribe(self, resource_name: str) -> None:
        """Tell every registered subscriber this flow read ``resource_name``."""
        self.subscribers.broadcast(resource_name)

    def _changed(self, resource_name: str) -> None:
        logger.debug("Resource changed: %s", resource_name, extra=self._log_context())
        self.notify_change(resource_name)

    # Remote calls
    def use_services(self, project: str | None = None) -> ServiceClient:
        """Client whose attributes are remote methods of ``project``."""
        return ServiceClient(self, project or self._project)

    async def call_service(
        self, service: str, args: list[Any], project: str | None = None
    ) -> Any:
        """Invoke a remote method through the service protocol."""
        target = project or self._project
        with self._reporting(f"call {service}"):
            return await self._service_protocol.call(self, target, service, args)

    # Data access
    async def insert(
        self, record_class: type[ActiveRecord], props: dict[str, Any]
    ) -> ActiveRecord:
        with self._reporting(f"insert {record_class.table_name()}"):
            record = await self._database.insert(self, record_class, props)
        self._changed(record_class.table_name())
        return record

    async def update(self, record: ActiveRecord) -> None:
        with self._reporting(f"update {record.table_name()}"):
            await self._database.update(self, record)
        self._changed(record.table_name())

    async def delete(self, record: ActiveRecord) -> None:
        with self._reporting(f"delete {record.table_name()}"):
            await self._database.delete(self, record)
        self._changed(record.table_name())

    async def query_by_example(
        self, record_class: type[ActiveRecord], props: dict[str, Any] | None = None
    ) -> list[ActiveRecord]:
        """Records equal to ``props`` on every given field."""
        with self._reporting(f"query {record_class.table_name()}"):
            records = await self._database.query_by_example(
                self, record_class, props or {}
            )
        self.subscribe(record_class.table_name())
        return records

    async def query_view(self, view: SqlView, sql_vars: Any = None) -> Any:
        """Run a reusable query function as ``view(scene, sql_vars)``."""
        with self._reporting("query view"):
            return await view(self, sql_vars)

    async def query(self, target: Any, arg: Any = None) -> Any:
        """``query_by_example`` for a record class, ``query_view`` for anything else."""
        if is_active_record(target):
            return await self.query_by_example(target, arg)
        return await self.query_view(target, arg)

    async def execute_sql(
        self,
        sql: str,
        sql_vars: dict[str, Any] | None = None,
        *,
        read: Sequence[type[ActiveRecord]] | None = None,
        write: Sequence[type[ActiveRecord]] | None = None,
    ) -> list[dict[str, Any]]:
        """Run raw SQL; ``read``/``write`` name the tables it touches."""
        with self._reporting("execute_sql"):
            rows = await self._database.execute_sql(
                self, sql, sql_vars or {}, read=read, write=write
            )
        for record_class in read or []:
            self.subscribe(record_class.table_name())
        for record_class in write or []:
            self._changed(record_class.table_name())
        return rows

    async def load(
        self, record_class: type[ActiveRecord], props: dict[str, Any] | None = None
    ) -> ActiveRecord:
        """The single record matching ``props``."""
        props = props or {}
        records = await self.query_by_example(record_class, props)
        if len(records) == 1:
            return records[0]

        if not records:
            error: Exception = NotFoundError(record_class.table_name(), props)
        else:
            error = MultipleMatchesError(record_class.table_name(), props, len(records))
        self._report_error(f"load {record_class.table_name()}", error)
        raise error

    async def get(self, record_class: type[ActiveRecord], id: Any = None) -> ActiveRecord:
        """Load by primary key, or the table's only row when ``id`` is None."""
        props = {record_class.primary_key: id} if id is not None else {}
        return await self.load(record_class, props)

    # Flow helpers
    async def sleep(self, millis: float) -> None:
        await asyncio.sleep(millis / 1000)

    def start_task(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task:
        """Schedule ``coro`` as part of this flow and announce it to the operation."""
        task = asyncio.create_task(coro)
        hook = self._operation.on_async_task_started
        if hook is not None:
            hook(task)
        return task

    def fork(self, operation: Operation | None = None) -> "Scene":
        """New scene for a sub-flow: same ports and project, no subscribers."""
        return Scene(
            operation or self._operation,
            database=self._database,
            service_protocol=self._service_protocol,
            project=self._project,
        )

    def __getstate__(self) -> Any:
        raise TypeError("Scene is process-local and can not be serialized")

    def __repr__(self) -> str:
        return f"<Scene [OP]{self._operation.trace_id} {self._operation.trace_op}>"
