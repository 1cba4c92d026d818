"""Remote-call module."""

from .host import ServiceHost
from .http import HttpServiceProtocol
from .local import LocalServiceProtocol
from .protocol import IServiceProtocol

__all__ = [
    "IServiceProtocol",
    "ServiceHost",
    "LocalServiceProtocol",
    "HttpServiceProtocol",
]
