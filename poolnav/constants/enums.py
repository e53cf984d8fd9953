"""All enum definitions for the navigation console.

This module consolidates all enumerations used throughout the application.
"""

from enum import Enum

# =============================================================================
# Object Enums
# =============================================================================

class ObjectType(str, Enum):
    """Cache record types understood by the navigation tree."""

    POOL = "pool"
    HOST = "host"
    VM = "vm"
    SR = "sr"
    PBD = "pbd"
    VBD = "vbd"
    VDI = "vdi"
    VM_APPLIANCE = "vm_appliance"
    CONNECTION = "connection"
    DISCONNECTED_HOST = "disconnected_host"


class PowerState(Enum):
    """VM power state values from the XenAPI record."""

    RUNNING = "Running"
    HALTED = "Halted"
    SUSPENDED = "Suspended"
    PAUSED = "Paused"


class SRContentType(Enum):
    """Storage repository content types with special tree handling."""

    ISO = "iso"
    USER = "user"


class VBDType(Enum):
    """Virtual block device types."""

    DISK = "Disk"
    CD = "CD"


# =============================================================================
# Navigation Enums
# =============================================================================

class NavigationMode(Enum):
    """Hierarchy layouts the navigation tree can be built in."""

    INFRASTRUCTURE = "infrastructure"
    OBJECTS = "objects"
    TAGS = "tags"
    FOLDERS = "folders"
    CUSTOM_FIELDS = "custom_fields"
    VAPPS = "vapps"

    @property
    def is_organization(self) -> bool:
        """True for modes that group objects by a user-defined attribute."""
        return self not in (NavigationMode.INFRASTRUCTURE, NavigationMode.OBJECTS)


class GroupingKind(Enum):
    """Stable identifiers of grouping strategies used in GroupingTag equality."""

    ROOT = "root"
    PLACEHOLDER = "placeholder"
    TYPE = "type"
    POOL = "pool"
    HOST = "host"
    TAG = "tag"
    FOLDER = "folder"
    CUSTOM_FIELD = "custom_field"
    VAPP = "vapp"


__all__ = [
    # Objects
    "ObjectType",
    "PowerState",
    "SRContentType",
    "VBDType",
    # Navigation
    "GroupingKind",
    "NavigationMode",
]
