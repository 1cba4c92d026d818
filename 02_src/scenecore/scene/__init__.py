"""Scene module."""

from .scene import Scene, SqlView
from .services import ServiceClient
from .subscribers import ISubscriber, SubscriberSet

__all__ = ["Scene", "SqlView", "ServiceClient", "ISubscriber", "SubscriberSet"]
