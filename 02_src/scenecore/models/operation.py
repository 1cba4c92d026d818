"""Operation (span) model.

trace -> operation -> scene. A trace is executed by several processes, each
execution is one operation (span). One operation owns one or more scenes: a
first render or a click on the client, or one handled request on the server,
are each an operation sharing the trace of whoever started it.
"""

import asyncio
import copy
from dataclasses import dataclass, field
from typing import Any, Callable

from ..ids import new_id
from .wire import BaggageValue, TraceContext, validate_baggage


@dataclass
class Operation:
    """One logical unit of distributed work."""

    # Transported over RPC
    trace_id: str
    span_id: str
    trace_op: str
    parent_span_id: str | None = None
    baggage: dict[str, BaggageValue] = field(default_factory=dict)
    # Process-local only
    props: dict[str, Any] = field(default_factory=dict)
    on_error: Callable[[BaseException], None] | None = None
    on_async_task_started: Callable[[asyncio.Task], None] | None = None

    def __setattr__(self, name: str, value: Any) -> None:
        if name == "trace_id" and "trace_id" in self.__dict__:
            raise AttributeError("trace_id is immutable once assigned")
        super().__setattr__(name, value)

    def to_wire(self) -> TraceContext:
        """Serialize the transported fields; baggage is validated and deep-copied."""
        return TraceContext(
            trace_id=self.trace_id,
            span_id=self.span_id,
            parent_span_id=self.parent_span_id,
            trace_op=self.trace_op,
            baggage=validate_baggage(self.baggage),
        )

    @classmethod
    def from_wire(cls, context: TraceContext) -> "Operation":
        """Rebuild an Operation received from another process."""
        return cls(
            trace_id=context.trace_id,
            span_id=context.span_id,
            trace_op=context.trace_op,
            parent_span_id=context.parent_span_id,
            baggage=copy.deepcopy(context.baggage),
        )


def new_operation(trace_op: str) -> Operation:
    """Start a new trace. The trace id is assigned here and passed along from then on."""
    return Operation(
        trace_id=new_id(),
        span_id=new_id(),
        trace_op=trace_op,
    )


def child_operation(parent: Operation, trace_op: str | None = None) -> Operation:
    """Create a sub-operation in the parent's trace."""
    return Operation(
        trace_id=parent.trace_id,
        span_id=new_id(),
        trace_op=trace_op if trace_op is not None else parent.trace_op,
        parent_span_id=parent.span_id,
        baggage=copy.deepcopy(parent.baggage),
        on_error=parent.on_error,
        on_async_task_started=parent.on_async_task_started,
    )
