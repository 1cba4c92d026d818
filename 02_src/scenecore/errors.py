"""Error taxonomy for scene-core."""

import json
from typing import Any


class SceneError(Exception):
    """Base class for errors raised by scene-core itself."""


class NotFoundError(SceneError, LookupError):
    """``load``/``get`` found no record matching the filter."""

    def __init__(self, table: str, props: dict[str, Any]):
        self.table = table
        self.props = props
        super().__init__(
            f"{table} is empty, can not find {json.dumps(props, default=str)}"
        )


class MultipleMatchesError(SceneError, LookupError):
    """``load``/``get`` found more than one record where exactly one was required."""

    def __init__(self, table: str, props: dict[str, Any], count: int):
        self.table = table
        self.props = props
        self.count = count
        super().__init__(
            f"{table} find {count} matches of {json.dumps(props, default=str)}"
        )


class ServiceNotFoundError(SceneError, LookupError):
    """No registered service handles the requested project/method."""

    def __init__(self, project: str, service: str):
        self.project = project
        self.service = service
        super().__init__(f"No service {service!r} in project {project!r}")


class RemoteCallError(SceneError):
    """The remote side answered a call with an error."""

    def __init__(self, service: str, status_code: int, detail: str):
        self.service = service
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"Remote call {service} failed ({status_code}): {detail}")
