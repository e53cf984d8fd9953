"""Unit tests for the navigation event channel."""

from __future__ import annotations

import dataclasses
import logging

import pytest

from poolnav.constants.enums import NavigationMode, ObjectType
from poolnav.models.tree.identity import ObjectIdentity
from poolnav.navigation.events import (
    EventChannel,
    NavigationEvent,
    RefreshResumed,
    SelectionChanged,
)

pytestmark = pytest.mark.unit

EVENT = SelectionChanged(ObjectIdentity(ObjectType.VM, "v1"), 3)


class TestEventChannel:
    def test_delivers_in_subscription_order(self) -> None:
        channel = EventChannel()
        received: list[str] = []
        channel.subscribe(lambda event: received.append("first"))
        channel.subscribe(lambda event: received.append("second"))
        channel.publish(EVENT)
        assert received == ["first", "second"]

    def test_unsubscribe(self) -> None:
        channel = EventChannel()
        received: list[NavigationEvent] = []
        unsubscribe = channel.subscribe(received.append)
        unsubscribe()
        unsubscribe()
        channel.publish(EVENT)
        assert received == []

    def test_failing_handler_does_not_stop_delivery(self, caplog: pytest.LogCaptureFixture) -> None:
        channel = EventChannel()
        received: list[NavigationEvent] = []

        def broken(event: NavigationEvent) -> None:
            raise ValueError("broken handler")

        channel.subscribe(broken)
        channel.subscribe(received.append)
        with caplog.at_level(logging.ERROR, logger="poolnav.navigation.events"):
            channel.publish(EVENT)

        assert received == [EVENT]
        assert "SelectionChanged" in caplog.text


class TestEvents:
    def test_events_are_frozen(self) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            EVENT.index = 4  # type: ignore[misc]

    def test_value_equality(self) -> None:
        assert RefreshResumed(NavigationMode.OBJECTS) == RefreshResumed(NavigationMode.OBJECTS)
