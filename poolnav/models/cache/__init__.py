"""Object cache models."""

from poolnav.models.cache.object_cache import ObjectCache, is_null_ref

__all__ = ["ObjectCache", "is_null_ref"]
