"""Placement rules deciding which host an object is shown under.

All functions here read the object cache only; running them twice on an
unchanged cache gives the same answer.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

from poolnav.constants.enums import ObjectType, PowerState, SRContentType, VBDType
from poolnav.constants.values import DEFAULT_TEMPLATE_KEY, HIDE_FROM_CONSOLE_KEY
from poolnav.models.cache.object_cache import ObjectCache, is_null_ref

logger = logging.getLogger(__name__)

_LIVE_POWER_STATES = (PowerState.RUNNING.value, PowerState.PAUSED.value)


class HomingRule(Enum):
    """Which placement rule produced a VM's home."""

    RESIDENT = "resident"
    STORAGE = "storage"
    AFFINITY = "affinity"
    NONE = "none"


@dataclass(frozen=True)
class VMHome:
    """Host a VM belongs under, with the rule that decided it."""

    host_ref: str | None
    rule: HomingRule


_NO_HOME = VMHome(None, HomingRule.NONE)


# ============================================================================
# Record predicates
# ============================================================================

def is_hidden(record: dict[str, Any]) -> bool:
    """True when the record carries the hide-from-console flag."""
    other_config = record.get("other_config") or {}
    return str(other_config.get(HIDE_FROM_CONSOLE_KEY, "")).lower() == "true"


def is_default_template(record: dict[str, Any]) -> bool:
    """True for templates shipped with the server rather than created by users."""
    other_config = record.get("other_config") or {}
    return bool(record.get("is_default_template")) or (
        str(other_config.get(DEFAULT_TEMPLATE_KEY, "")).lower() == "true"
    )


def is_real_vm(record: dict[str, Any]) -> bool:
    """True for VMs that are not templates, snapshots or control domains."""
    return not (
        record.get("is_a_template")
        or record.get("is_a_snapshot")
        or record.get("is_control_domain")
    )


def is_iso_or_tools_sr(record: dict[str, Any]) -> bool:
    """ISO libraries and the tools SR never appear in the infrastructure tree."""
    return (
        record.get("content_type") == SRContentType.ISO.value
        or bool(record.get("is_tools_sr"))
    )


def is_local_sr(record: dict[str, Any]) -> bool:
    """Non-shared storage with a single attachment belongs to one host."""
    return not record.get("shared") and len(record.get("PBDs") or []) == 1


def _resolved_host(cache: ObjectCache, host_ref: Any) -> str | None:
    if is_null_ref(host_ref):
        return None
    if not cache.resolve(ObjectType.HOST, host_ref):
        return None
    return host_ref


# ============================================================================
# Storage
# ============================================================================

def sr_storage_host(cache: ObjectCache, sr: dict[str, Any]) -> str | None:
    """Host owning a local SR, or None for shared or unattached storage."""
    if not is_local_sr(sr):
        return None
    pbd = cache.resolve(ObjectType.PBD, sr["PBDs"][0])
    return _resolved_host(cache, pbd.get("host"))


def sr_attached_host_refs(cache: ObjectCache, sr_ref: str) -> list[str]:
    """Hosts holding a currently attached PBD to the SR, in PBD order."""
    hosts: list[str] = []
    for pbd in cache.get_all_of_type(ObjectType.PBD):
        if pbd.get("SR") != sr_ref or not pbd.get("currently_attached", True):
            continue
        host_ref = pbd.get("host")
        if not is_null_ref(host_ref) and host_ref not in hosts:
            hosts.append(host_ref)
    return hosts


def vm_storage_host(cache: ObjectCache, vm: dict[str, Any], ignore_cds: bool = True) -> str | None:
    """Host whose local storage holds the VM's disks.

    Disks on shared storage do not pin the VM anywhere and are skipped. The
    VM has a storage host only when its local disks all live on storage of
    one and the same host.
    """
    local_hosts: list[str] = []
    for vbd_ref in vm.get("VBDs") or []:
        vbd = cache.resolve(ObjectType.VBD, vbd_ref)
        if not vbd:
            continue
        if ignore_cds and vbd.get("type") == VBDType.CD.value:
            continue
        vdi = cache.resolve(ObjectType.VDI, vbd.get("VDI"))
        if not vdi:
            continue
        sr = cache.resolve(ObjectType.SR, vdi.get("SR"))
        if not sr:
            continue
        host_ref = sr_storage_host(cache, sr)
        if host_ref is not None and host_ref not in local_hosts:
            local_hosts.append(host_ref)

    if len(local_hosts) == 1:
        return local_hosts[0]
    if len(local_hosts) > 1:
        logger.debug(
            "VM %s has local disks on %d hosts, no storage host",
            vm.get("ref"),
            len(local_hosts),
        )
    return None


# ============================================================================
# VM homing
# ============================================================================

def resolve_vm_home(cache: ObjectCache, vm: dict[str, Any]) -> VMHome:
    """Decide which host a VM is shown under.

    Precedence, first match wins:
    1. running or paused: the resident host
    2. disks on storage local to exactly one host: that host
    3. an affinity host that is not disabled: that host
    4. no host (shown under the pool)

    A snapshot shares the home of the VM it was taken from. Templates have
    no home. Every candidate host must resolve in the cache.
    """
    if vm.get("is_a_snapshot"):
        parent = cache.resolve(ObjectType.VM, vm.get("snapshot_of"))
        if not parent or parent.get("is_a_snapshot"):
            return _NO_HOME
        return resolve_vm_home(cache, parent)

    if vm.get("is_a_template"):
        return _NO_HOME

    if vm.get("power_state") in _LIVE_POWER_STATES:
        resident = _resolved_host(cache, vm.get("resident_on"))
        if resident is not None:
            return VMHome(resident, HomingRule.RESIDENT)

    storage_host = vm_storage_host(cache, vm)
    if storage_host is not None:
        return VMHome(storage_host, HomingRule.STORAGE)

    affinity = _resolved_host(cache, vm.get("affinity"))
    if affinity is not None:
        affinity_host = cache.resolve(ObjectType.HOST, affinity)
        if affinity_host.get("enabled", True):
            return VMHome(affinity, HomingRule.AFFINITY)

    return _NO_HOME


def vm_home(cache: ObjectCache, vm: dict[str, Any]) -> str | None:
    """Host ref a VM belongs under, or None for pool-level placement."""
    return resolve_vm_home(cache, vm).host_ref


def placement_host(cache: ObjectCache, record: dict[str, Any], obj_type: ObjectType) -> str | None:
    """Host a host, VM or local SR is placed under; None for anything else."""
    if obj_type == ObjectType.HOST:
        return record.get("ref")
    if obj_type == ObjectType.VM:
        return vm_home(cache, record)
    if obj_type == ObjectType.SR:
        return sr_storage_host(cache, record)
    return None


__all__ = [
    "HomingRule",
    "VMHome",
    "is_default_template",
    "is_hidden",
    "is_iso_or_tools_sr",
    "is_local_sr",
    "is_real_vm",
    "placement_host",
    "resolve_vm_home",
    "sr_attached_host_refs",
    "sr_storage_host",
    "vm_home",
    "vm_storage_host",
]
