"""Keyboard bindings module.

- app: App-level bindings (APP_BINDINGS) and navigation mode keys (MODE_KEYS)
"""

from poolnav.keyboard.app import APP_BINDINGS, MODE_KEYS

__all__ = [
    "APP_BINDINGS",
    "MODE_KEYS",
]
