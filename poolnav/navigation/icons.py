"""Icon classification keys for tree nodes.

The tree only carries a key such as ``"vm_running"``; turning keys into
glyphs or images is the renderer's concern.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from poolnav.constants.enums import ObjectType, PowerState
from poolnav.navigation.homing import is_default_template, is_local_sr

IconClassifier = Callable[[ObjectType, dict[str, Any]], str]

_VM_POWER_ICONS = {
    PowerState.RUNNING.value: "vm_running",
    PowerState.HALTED.value: "vm_halted",
    PowerState.SUSPENDED.value: "vm_suspended",
    PowerState.PAUSED.value: "vm_paused",
}


def default_icon_key(obj_type: ObjectType, record: dict[str, Any]) -> str:
    """Classify a record into an icon key."""
    if obj_type == ObjectType.VM:
        if record.get("is_a_snapshot"):
            return "snapshot"
        if record.get("is_a_template"):
            return "template_default" if is_default_template(record) else "template_user"
        return _VM_POWER_ICONS.get(record.get("power_state", ""), "vm_generic")

    if obj_type == ObjectType.HOST:
        return "host" if record.get("enabled", True) else "host_maintenance"

    if obj_type == ObjectType.SR:
        return "sr_local" if is_local_sr(record) else "sr_shared"

    return obj_type.value


# Glyphs used by the text renderer.
ICON_GLYPHS: dict[str, str] = {
    "root": "◆",
    "group": "▣",
    "placeholder": "…",
    "pool": "◎",
    "host": "▤",
    "host_maintenance": "▥",
    "disconnected_host": "✕",
    "connection": "⟳",
    "vm_running": "▶",
    "vm_halted": "■",
    "vm_suspended": "⏸",
    "vm_paused": "‖",
    "vm_generic": "□",
    "template_default": "◇",
    "template_user": "◈",
    "snapshot": "◌",
    "sr_local": "▦",
    "sr_shared": "▩",
    "vm_appliance": "▧",
}


def glyph_for(icon_key: str) -> str:
    """Glyph for an icon key, with a neutral fallback."""
    return ICON_GLYPHS.get(icon_key, "•")


__all__ = [
    "ICON_GLYPHS",
    "IconClassifier",
    "default_icon_key",
    "glyph_for",
]
