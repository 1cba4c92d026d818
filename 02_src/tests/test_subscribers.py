"""Tests for the subscriber registry."""

import pytest

from scenecore.models import new_operation
from scenecore.scene import Scene, SubscriberSet

from fakes import FakeDatabase, FakeServiceProtocol, RecordingSubscriber


class TestSubscriberSet:
    """Tests for SubscriberSet membership."""

    def test_add_and_discard(self):
        """Test joining and leaving."""
        subscribers = SubscriberSet()
        s1 = RecordingSubscriber()
        subscribers.add(s1)
        assert s1 in subscribers
        assert len(subscribers) == 1

        subscribers.discard(s1)
        assert s1 not in subscribers
        assert len(subscribers) == 0

    def test_add_twice_is_noop(self):
        """Test that membership is a set."""
        subscribers = SubscriberSet()
        s1 = RecordingSubscriber()
        subscribers.add(s1)
        subscribers.add(s1)
        subscribers.broadcast("orders")
        assert s1.resources == ["orders"]

    def test_discard_missing_is_noop(self):
        """Test removing a subscriber that never joined."""
        SubscriberSet().discard(RecordingSubscriber())

    def test_equal_subscribers_are_distinct(self):
        """Test that membership is by identity, not equality."""

        class Same:
            def __eq__(self, other):
                return True

            __hash__ = None

            def subscribe(self, resource_name):
                pass

        subscribers = SubscriberSet()
        subscribers.add(Same())
        subscribers.add(Same())
        assert len(subscribers) == 2


class TestBroadcast:
    """Tests for broadcast fan-out."""

    def test_fan_out_exactly_once(self):
        """Test that each subscriber hears each broadcast once."""
        log = []
        subscribers = SubscriberSet()
        subscribers.add(RecordingSubscriber("s1", log))
        subscribers.add(RecordingSubscriber("s2", log))

        subscribers.broadcast("orders")

        assert sorted(log) == [("s1", "orders"), ("s2", "orders")]

    def test_self_removal_during_broadcast(self):
        """Test that a subscriber leaving mid-broadcast does not skip others."""
        subscribers = SubscriberSet()
        s2 = RecordingSubscriber("s2")

        class Leaving(RecordingSubscriber):
            def subscribe(self, resource_name):
                super().subscribe(resource_name)
                subscribers.discard(self)

        s1 = Leaving("s1")
        subscribers.add(s1)
        subscribers.add(s2)

        subscribers.broadcast("orders")

        assert s1.resources == ["orders"]
        assert s2.resources == ["orders"]
        assert s1 not in subscribers

        subscribers.broadcast("orders")
        assert s1.resources == ["orders"]
        assert s2.resources == ["orders", "orders"]

    def test_removing_another_during_broadcast(self):
        """Test that members present at broadcast start are all notified."""
        subscribers = SubscriberSet()
        s2 = RecordingSubscriber("s2")

        class Evicting(RecordingSubscriber):
            def subscribe(self, resource_name):
                super().subscribe(resource_name)
                subscribers.discard(s2)

        subscribers.add(Evicting("s1"))
        subscribers.add(s2)

        subscribers.broadcast("orders")
        assert s2.resources == ["orders"]

    def test_added_during_broadcast_waits(self):
        """Test that a subscriber joining mid-broadcast hears the next one."""
        subscribers = SubscriberSet()
        late = RecordingSubscriber("late")

        class Inviting(RecordingSubscriber):
            def subscribe(self, resource_name):
                super().subscribe(resource_name)
                subscribers.add(late)

        subscribers.add(Inviting("s1"))
        subscribers.broadcast("orders")
        assert late.resources == []

        subscribers.broadcast("lines")
        assert late.resources == ["lines"]

    def test_subscriber_error_propagates(self):
        """Test that a failing subscriber surfaces to the caller."""

        class Broken:
            def subscribe(self, resource_name):
                raise RuntimeError("boom")

        subscribers = SubscriberSet()
        subscribers.add(Broken())
        with pytest.raises(RuntimeError, match="boom"):
            subscribers.broadcast("orders")


class TestSceneSubscriptions:
    """Tests for subscriptions through a Scene."""

    def _scene(self):
        return Scene(
            new_operation("render"),
            database=FakeDatabase(),
            service_protocol=FakeServiceProtocol(),
        )

    def test_scene_subscribe_broadcasts(self):
        """Test Scene.subscribe fan-out."""
        scene = self._scene()
        s1, s2 = RecordingSubscriber(), RecordingSubscriber()
        scene.add_subscriber(s1)
        scene.add_subscriber(s2)

        scene.subscribe("orders")

        assert s1.resources == ["orders"]
        assert s2.resources == ["orders"]

    def test_remove_subscriber(self):
        """Test leaving a scene's set."""
        scene = self._scene()
        s1 = RecordingSubscriber()
        scene.add_subscriber(s1)
        scene.remove_subscriber(s1)
        scene.subscribe("orders")
        assert s1.resources == []

    def test_independent_scenes_are_isolated(self):
        """Test that scenes never see each other's broadcasts."""
        a, b = self._scene(), self._scene()
        sa, sb = RecordingSubscriber(), RecordingSubscriber()
        a.add_subscriber(sa)
        b.add_subscriber(sb)

        a.subscribe("orders")
        b.subscribe("lines")

        assert sa.resources == ["orders"]
        assert sb.resources == ["lines"]

    def test_scene_without_subscribers(self):
        """Test that broadcasting to nobody is fine."""
        self._scene().subscribe("orders")
