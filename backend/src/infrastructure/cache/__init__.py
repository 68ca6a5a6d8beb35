"""Lookup caching."""

from .cached_property_repository import CachedPropertyRepository
from .ttl_cache import TTLCache

__all__ = ["CachedPropertyRepository", "TTLCache"]
