"""Scene core: execution context for distributed flows."""

from .app import Application, IApplication
from .errors import (
    MultipleMatchesError,
    NotFoundError,
    RemoteCallError,
    SceneError,
    ServiceNotFoundError,
)
from .ids import new_id
from .models import (
    ActiveRecord,
    CallRequest,
    CallResponse,
    Operation,
    TraceContext,
    child_operation,
    is_active_record,
    new_operation,
)
from .rpc import HttpServiceProtocol, IServiceProtocol, LocalServiceProtocol, ServiceHost
from .scene import ISubscriber, Scene, ServiceClient, SubscriberSet
from .storage import IDatabase, SqliteDatabase

__all__ = [
    # Application
    "Application",
    "IApplication",
    # Models
    "Operation",
    "new_operation",
    "child_operation",
    "new_id",
    "ActiveRecord",
    "is_active_record",
    "TraceContext",
    "CallRequest",
    "CallResponse",
    # Scene
    "Scene",
    "ServiceClient",
    "ISubscriber",
    "SubscriberSet",
    # Ports
    "IDatabase",
    "SqliteDatabase",
    "IServiceProtocol",
    "ServiceHost",
    "LocalServiceProtocol",
    "HttpServiceProtocol",
    # Errors
    "SceneError",
    "NotFoundError",
    "MultipleMatchesError",
    "ServiceNotFoundError",
    "RemoteCallError",
]
