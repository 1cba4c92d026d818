"""Core data models for scene-core."""

from .operation import Operation, child_operation, new_operation
from .record import ActiveRecord, is_active_record, table_name
from .wire import (
    BaggageValue,
    CallRequest,
    CallResponse,
    TraceContext,
    validate_baggage,
)

__all__ = [
    # Operation
    "Operation",
    "new_operation",
    "child_operation",
    # Records
    "ActiveRecord",
    "is_active_record",
    "table_name",
    # Wire
    "BaggageValue",
    "TraceContext",
    "CallRequest",
    "CallResponse",
    "validate_baggage",
]
