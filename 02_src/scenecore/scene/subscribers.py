"""Subscriber registry for resource reads."""

from typing import Iterator, Protocol

from ..logging_config import get_logger

logger = get_logger(__name__)


class ISubscriber(Protocol):
    """Listener told which resources a flow touched."""

    def subscribe(self, resource_name: str) -> None:
        """Record that ``resource_name`` was read."""
        ...


class SubscriberSet:
    """Mutable set of subscribers with snapshot broadcast."""

    def __init__(self) -> None:
        # dict keeps insertion order and identity-based membership
        self._subscribers: dict[int, ISubscriber] = {}

    def add(self, subscriber: ISubscriber) -> None:
        """Register a subscriber; adding it twice is a no-op."""
        self._subscribers[id(subscriber)] = subscriber

    def discard(self, subscriber: ISubscriber) -> None:
        """Remove a subscriber if present."""
        self._subscribers.pop(id(subscriber), None)

    def clear(self) -> None:
        self._subscribers.clear()

    def __contains__(self, subscriber: object) -> bool:
        return self._subscribers.get(id(subscriber)) is subscriber

    def __len__(self) -> int:
        return len(self._subscribers)

    def __iter__(self) -> Iterator[ISubscriber]:
        return iter(list(self._subscribers.values()))

    def broadcast(self, resource_name: str) -> None:
        """Notify every subscriber registered when the broadcast started, once."""
        snapshot = list(self._subscribers.values())
        logger.debug("Broadcasting %s to %d subscribers", resource_name, len(snapshot))
        for subscriber in snapshot:
            subscriber.subscribe(resource_name)
