"""Unit tests for VM and SR placement rules."""

from __future__ import annotations

import pytest

from poolnav.constants.enums import ObjectType
from poolnav.models.cache.object_cache import ObjectCache
from poolnav.navigation.homing import (
    HomingRule,
    is_default_template,
    is_hidden,
    is_iso_or_tools_sr,
    is_local_sr,
    is_real_vm,
    placement_host,
    resolve_vm_home,
    sr_attached_host_refs,
    sr_storage_host,
    vm_home,
    vm_storage_host,
)

pytestmark = pytest.mark.unit


@pytest.fixture
def cache() -> ObjectCache:
    """Two hosts, one local SR each, one shared SR and a VDI on each SR."""
    cache = ObjectCache()
    cache.update(ObjectType.HOST, "h1", {"name_label": "H1", "enabled": True})
    cache.update(ObjectType.HOST, "h2", {"name_label": "H2", "enabled": True})
    cache.update(ObjectType.HOST, "h-off", {"name_label": "Off", "enabled": False})
    cache.update(ObjectType.SR, "local1", {"shared": False, "PBDs": ["pbd-l1"]})
    cache.update(ObjectType.SR, "local2", {"shared": False, "PBDs": ["pbd-l2"]})
    cache.update(ObjectType.SR, "nfs", {"shared": True, "PBDs": ["pbd-n1", "pbd-n2"]})
    cache.update(ObjectType.PBD, "pbd-l1", {"host": "h1", "SR": "local1"})
    cache.update(ObjectType.PBD, "pbd-l2", {"host": "h2", "SR": "local2"})
    cache.update(ObjectType.PBD, "pbd-n1", {"host": "h1", "SR": "nfs", "currently_attached": True})
    cache.update(ObjectType.PBD, "pbd-n2", {"host": "h2", "SR": "nfs", "currently_attached": False})
    for sr in ("local1", "local2", "nfs"):
        cache.update(ObjectType.VDI, f"vdi-{sr}", {"SR": sr})
        cache.update(ObjectType.VBD, f"vbd-{sr}", {"VDI": f"vdi-{sr}", "type": "Disk"})
        cache.update(ObjectType.VBD, f"cd-{sr}", {"VDI": f"vdi-{sr}", "type": "CD"})
    return cache


# =============================================================================
# Predicates
# =============================================================================


class TestPredicates:
    def test_is_hidden(self) -> None:
        assert is_hidden({"other_config": {"HideFromXenCenter": "true"}})
        assert is_hidden({"other_config": {"HideFromXenCenter": "True"}})
        assert not is_hidden({"other_config": {"HideFromXenCenter": "false"}})
        assert not is_hidden({})

    def test_is_default_template(self) -> None:
        assert is_default_template({"other_config": {"default_template": "true"}})
        assert is_default_template({"is_default_template": True})
        assert not is_default_template({"is_a_template": True})

    def test_is_real_vm(self) -> None:
        assert is_real_vm({"power_state": "Halted"})
        assert not is_real_vm({"is_a_template": True})
        assert not is_real_vm({"is_a_snapshot": True})
        assert not is_real_vm({"is_control_domain": True})

    def test_is_iso_or_tools_sr(self) -> None:
        assert is_iso_or_tools_sr({"content_type": "iso"})
        assert is_iso_or_tools_sr({"is_tools_sr": True})
        assert not is_iso_or_tools_sr({"content_type": "user"})

    def test_is_local_sr(self) -> None:
        assert is_local_sr({"shared": False, "PBDs": ["a"]})
        assert not is_local_sr({"shared": True, "PBDs": ["a"]})
        assert not is_local_sr({"shared": False, "PBDs": ["a", "b"]})
        assert not is_local_sr({"shared": False, "PBDs": []})


# =============================================================================
# Storage
# =============================================================================


class TestStorageHosts:
    def test_local_sr_host(self, cache: ObjectCache) -> None:
        assert sr_storage_host(cache, cache.resolve(ObjectType.SR, "local1")) == "h1"

    def test_shared_sr_has_no_host(self, cache: ObjectCache) -> None:
        assert sr_storage_host(cache, cache.resolve(ObjectType.SR, "nfs")) is None

    def test_attached_hosts_skip_unplugged_pbds(self, cache: ObjectCache) -> None:
        assert sr_attached_host_refs(cache, "nfs") == ["h1"]

    def test_attached_defaults_to_plugged(self, cache: ObjectCache) -> None:
        assert sr_attached_host_refs(cache, "local2") == ["h2"]

    def test_vm_on_single_local_sr(self, cache: ObjectCache) -> None:
        assert vm_storage_host(cache, {"VBDs": ["vbd-local1"]}) == "h1"

    def test_shared_disks_are_ignored(self, cache: ObjectCache) -> None:
        assert vm_storage_host(cache, {"VBDs": ["vbd-nfs", "vbd-local2"]}) == "h2"

    def test_local_disks_on_two_hosts(self, cache: ObjectCache) -> None:
        assert vm_storage_host(cache, {"VBDs": ["vbd-local1", "vbd-local2"]}) is None

    def test_cd_drives_are_ignored(self, cache: ObjectCache) -> None:
        vm = {"VBDs": ["vbd-local1", "cd-local2"]}
        assert vm_storage_host(cache, vm) == "h1"
        assert vm_storage_host(cache, vm, ignore_cds=False) is None

    def test_dangling_references(self, cache: ObjectCache) -> None:
        assert vm_storage_host(cache, {"VBDs": ["missing", "OpaqueRef:NULL"]}) is None


# =============================================================================
# VM homing
# =============================================================================


class TestVMHoming:
    def test_running_vm_lives_on_resident_host(self, cache: ObjectCache) -> None:
        vm = {"power_state": "Running", "resident_on": "h2", "VBDs": ["vbd-local1"]}
        home = resolve_vm_home(cache, vm)
        assert home.host_ref == "h2"
        assert home.rule == HomingRule.RESIDENT

    def test_paused_vm_lives_on_resident_host(self, cache: ObjectCache) -> None:
        assert vm_home(cache, {"power_state": "Paused", "resident_on": "h1"}) == "h1"

    def test_halted_vm_ignores_resident_on(self, cache: ObjectCache) -> None:
        assert vm_home(cache, {"power_state": "Halted", "resident_on": "h1"}) is None

    def test_unresolved_resident_falls_through_to_storage(self, cache: ObjectCache) -> None:
        vm = {"power_state": "Running", "resident_on": "gone", "VBDs": ["vbd-local2"]}
        home = resolve_vm_home(cache, vm)
        assert home.host_ref == "h2"
        assert home.rule == HomingRule.STORAGE

    def test_storage_wins_over_affinity(self, cache: ObjectCache) -> None:
        vm = {"power_state": "Halted", "affinity": "h2", "VBDs": ["vbd-local1"]}
        assert resolve_vm_home(cache, vm).rule == HomingRule.STORAGE
        assert vm_home(cache, vm) == "h1"

    def test_affinity(self, cache: ObjectCache) -> None:
        home = resolve_vm_home(cache, {"power_state": "Halted", "affinity": "h2"})
        assert home.host_ref == "h2"
        assert home.rule == HomingRule.AFFINITY

    def test_disabled_affinity_host_is_skipped(self, cache: ObjectCache) -> None:
        assert vm_home(cache, {"power_state": "Halted", "affinity": "h-off"}) is None

    def test_unresolved_affinity(self, cache: ObjectCache) -> None:
        assert vm_home(cache, {"power_state": "Halted", "affinity": "OpaqueRef:NULL"}) is None
        assert vm_home(cache, {"power_state": "Halted", "affinity": "gone"}) is None

    def test_snapshot_follows_parent(self, cache: ObjectCache) -> None:
        cache.update(ObjectType.VM, "parent", {"power_state": "Running", "resident_on": "h1"})
        assert vm_home(cache, {"is_a_snapshot": True, "snapshot_of": "parent"}) == "h1"

    def test_orphan_snapshot(self, cache: ObjectCache) -> None:
        assert vm_home(cache, {"is_a_snapshot": True, "snapshot_of": "gone"}) is None

    def test_templates_have_no_home(self, cache: ObjectCache) -> None:
        vm = {"is_a_template": True, "affinity": "h1", "VBDs": ["vbd-local1"]}
        assert resolve_vm_home(cache, vm).rule == HomingRule.NONE

    def test_deterministic(self, cache: ObjectCache) -> None:
        vm = {"power_state": "Halted", "affinity": "h2", "VBDs": ["vbd-nfs", "vbd-local1"]}
        assert {vm_home(cache, vm) for _ in range(5)} == {"h1"}


# =============================================================================
# Placement
# =============================================================================


class TestPlacementHost:
    def test_host_is_placed_under_itself(self, cache: ObjectCache) -> None:
        assert placement_host(cache, {"ref": "h2"}, ObjectType.HOST) == "h2"

    def test_vm_follows_homing(self, cache: ObjectCache) -> None:
        vm = {"power_state": "Halted", "VBDs": ["vbd-local2"]}
        assert placement_host(cache, vm, ObjectType.VM) == "h2"

    def test_sr_follows_local_storage(self, cache: ObjectCache) -> None:
        assert placement_host(cache, cache.resolve(ObjectType.SR, "local1"), ObjectType.SR) == "h1"
        assert placement_host(cache, cache.resolve(ObjectType.SR, "nfs"), ObjectType.SR) is None

    def test_other_types_have_no_host(self, cache: ObjectCache) -> None:
        assert placement_host(cache, {"ref": "p1"}, ObjectType.POOL) is None
        assert placement_host(cache, cache.resolve(ObjectType.PBD, "pbd-l1"), ObjectType.PBD) is None
