"""Scalar constants for the navigation console.

All application-level constants with proper type hints using Final.
"""

from typing import Final

from poolnav.constants.enums import NavigationMode

# ============================================================================
# Application
# ============================================================================

APP_TITLE: Final = "PoolNav"

# ============================================================================
# XenAPI conventions
# ============================================================================

NULL_REF: Final = "OpaqueRef:NULL"
DEFAULT_PORT: Final = 443
CUSTOM_FIELD_PREFIX: Final = "XenCenter.CustomFields."
HIDE_FROM_CONSOLE_KEY: Final = "HideFromXenCenter"
DEFAULT_TEMPLATE_KEY: Final = "default_template"
FOLDER_KEY: Final = "folder"
FOLDER_SEPARATOR: Final = "/"

# ============================================================================
# Tree labels
# ============================================================================

ROOT_LABELS: Final = {
    NavigationMode.INFRASTRUCTURE: "Infrastructure",
    NavigationMode.OBJECTS: "Objects",
    NavigationMode.TAGS: "Tags",
    NavigationMode.FOLDERS: "Folders",
    NavigationMode.CUSTOM_FIELDS: "Custom Fields",
    NavigationMode.VAPPS: "vApps",
}

PLACEHOLDER_NO_CONNECTIONS: Final = "Connect to a server"
PLACEHOLDER_NO_OBJECTS: Final = "(No objects found)"
PLACEHOLDER_NO_MATCHES: Final = "(No matching objects)"
CONNECTING_SUFFIX: Final = "(connecting...)"

UNNAMED_POOL: Final = "(Unnamed Pool)"
UNNAMED_HOST: Final = "(Unnamed Host)"
UNNAMED_VM: Final = "(Unnamed VM)"
UNNAMED_SR: Final = "(Unnamed Storage)"
UNKNOWN_POOL: Final = "Unknown Pool"
UNKNOWN_SERVER: Final = "Unknown Server"
UNKNOWN_VAPP: Final = "Unknown vApp"

# Objects-view group headers, in display order.
TYPE_GROUP_ORDER: Final = (
    "pool",
    "host",
    "vm",
    "template",
    "sr",
    "disconnected_host",
)

TYPE_GROUP_NAMES: Final = {
    "pool": "Pools",
    "host": "Hosts",
    "vm": "VMs",
    "template": "Templates",
    "snapshot": "Snapshots",
    "sr": "Storage",
    "vm_appliance": "vApps",
    "disconnected_host": "Disconnected servers",
}

__all__ = [
    "APP_TITLE",
    "CONNECTING_SUFFIX",
    "CUSTOM_FIELD_PREFIX",
    "DEFAULT_PORT",
    "DEFAULT_TEMPLATE_KEY",
    "FOLDER_KEY",
    "FOLDER_SEPARATOR",
    "HIDE_FROM_CONSOLE_KEY",
    "NULL_REF",
    "PLACEHOLDER_NO_CONNECTIONS",
    "PLACEHOLDER_NO_MATCHES",
    "PLACEHOLDER_NO_OBJECTS",
    "ROOT_LABELS",
    "TYPE_GROUP_NAMES",
    "TYPE_GROUP_ORDER",
    "UNKNOWN_POOL",
    "UNKNOWN_SERVER",
    "UNKNOWN_VAPP",
    "UNNAMED_HOST",
    "UNNAMED_POOL",
    "UNNAMED_SR",
    "UNNAMED_VM",
]
