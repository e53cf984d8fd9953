"""Navigation console for pools of virtualization hosts."""

__version__ = "0.1.0"
