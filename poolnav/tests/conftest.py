"""Shared fixtures for poolnav tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from poolnav.constants.enums import ObjectType
from poolnav.models.cache.object_cache import ObjectCache
from poolnav.models.connections.registry import Connection, ConnectionRegistry

SAMPLE_INVENTORY = Path(__file__).resolve().parents[2] / "inventory.sample.yaml"


# =============================================================================
# Timers
# =============================================================================


class FakeTimer:
    """Manually fired timer."""

    def __init__(self, delay: float, callback: Callable[[], None]) -> None:
        self.delay = delay
        self.callback = callback
        self.stopped = False

    def stop(self) -> None:
        self.stopped = True

    def fire(self) -> None:
        assert not self.stopped, "stopped timers never fire"
        self.callback()


class FakeTimerFactory:
    """Timer factory recording every timer it creates."""

    def __init__(self) -> None:
        self.timers: list[FakeTimer] = []

    def __call__(self, delay: float, callback: Callable[[], None]) -> FakeTimer:
        timer = FakeTimer(delay, callback)
        self.timers.append(timer)
        return timer

    @property
    def active(self) -> list[FakeTimer]:
        return [timer for timer in self.timers if not timer.stopped]

    def fire_active(self) -> None:
        for timer in self.active:
            timer.stop()
            timer.callback()


@pytest.fixture
def fake_timers() -> FakeTimerFactory:
    return FakeTimerFactory()


# =============================================================================
# Caches and registries
# =============================================================================


def fill_cache(cache: ObjectCache, objects: dict[ObjectType, dict[str, dict[str, Any]]]) -> ObjectCache:
    for obj_type, records in objects.items():
        cache.update_many(obj_type, records.items())
    return cache


@pytest.fixture
def make_registry() -> Callable[..., ConnectionRegistry]:
    """Build a registry with one connected connection holding ``objects``."""

    def _make(
        objects: dict[ObjectType, dict[str, dict[str, Any]]] | None = None,
        hostname: str = "xs1.lab",
        connected: bool = True,
    ) -> ConnectionRegistry:
        connection = Connection(hostname=hostname, connected=connected)
        fill_cache(connection.cache, objects or {})
        return ConnectionRegistry([connection])

    return _make


@pytest.fixture
def simple_objects() -> dict[ObjectType, dict[str, dict[str, Any]]]:
    """Pool P1 with host H1 running VM V1."""
    return {
        ObjectType.POOL: {"p1": {"name_label": "P1", "master": "h1"}},
        ObjectType.HOST: {"h1": {"name_label": "H1", "enabled": True}},
        ObjectType.VM: {
            "v1": {"name_label": "V1", "power_state": "Running", "resident_on": "h1"},
        },
    }


@pytest.fixture
def simple_registry(make_registry, simple_objects) -> ConnectionRegistry:
    return make_registry(simple_objects)


@pytest.fixture
def sample_inventory_path() -> Path:
    return SAMPLE_INVENTORY


# =============================================================================
# Tree inspection
# =============================================================================


def _outline(store) -> list[str]:
    """Pre-order list of labels indented two spaces per depth."""
    return ["  " * len(store.ancestors(node.index)) + node.label for node in store.walk()]


@pytest.fixture
def outline() -> Callable[[Any], list[str]]:
    return _outline
