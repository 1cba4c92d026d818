"""Wire models for remote calls.

Only these shapes cross a process boundary. ``TraceContext`` carries the
transported part of an Operation; process-local fields have no place here.
"""

import math
from typing import Any, Union

from pydantic import BaseModel, Field, field_validator

# Transport-safe baggage values; dicts nest recursively.
BaggageValue = Union[bool, int, float, str, dict[str, Any]]


def validate_baggage(baggage: Any, path: str = "baggage") -> dict[str, BaggageValue]:
    """
    Check that baggage holds only transport-safe values and return a deep copy.

    Args:
        baggage: Mapping of string keys to str/int/float/bool/nested mappings.
        path: Location used in error messages.

    Raises:
        TypeError: On a non-string key or a value of any other kind.
    """
    if not isinstance(baggage, dict):
        raise TypeError(f"{path} must be a dict, got {type(baggage).__name__}")

    copied: dict[str, BaggageValue] = {}
    for key, value in baggage.items():
        if not isinstance(key, str):
            raise TypeError(f"{path} keys must be str, got {key!r}")
        item_path = f"{path}.{key}"
        if isinstance(value, dict):
            copied[key] = validate_baggage(value, item_path)
        elif isinstance(value, float) and not math.isfinite(value):
            raise TypeError(f"{item_path} is not a finite number")
        elif isinstance(value, (str, bool, int, float)):
            copied[key] = value
        else:
            raise TypeError(
                f"{item_path} has unsupported type {type(value).__name__}"
            )
    return copied


class TraceContext(BaseModel):
    """Transported trace identity of an Operation."""

    trace_id: str
    span_id: str
    parent_span_id: str | None = None
    trace_op: str
    baggage: dict[str, Any] = Field(default_factory=dict)

    @field_validator("baggage")
    @classmethod
    def _check_baggage(cls, value: dict[str, Any]) -> dict[str, Any]:
        try:
            return validate_baggage(value)
        except TypeError as e:
            raise ValueError(str(e)) from e


class CallRequest(BaseModel):
    """Request body of a remote service call."""

    project: str = ""
    service: str
    args: list[Any] = Field(default_factory=list)
    trace: TraceContext


class CallResponse(BaseModel):
    """Response body of a successful remote service call."""

    result: Any = None
