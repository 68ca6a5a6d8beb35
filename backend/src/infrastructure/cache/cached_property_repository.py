"""Read-through cache in front of property and user lookups."""

from typing import Optional
from uuid import UUID

from domain.entities import Property, UserAccount
from domain.repositories import IPropertyRepository
from infrastructure.config import get_logger

from .ttl_cache import TTLCache


class CachedPropertyRepository(IPropertyRepository):
    """
    Wraps a property repository with a TTL cache.

    Authorization resolves the owner and manager of a property on every
    request; those lookups are served from the cache. Writes through this
    repository invalidate the affected entry.
    """

    def __init__(self, inner: IPropertyRepository, cache: TTLCache):
        self.inner = inner
        self.cache = cache
        self.logger = get_logger(self.__class__.__name__)

    async def get_property(self, property_id: UUID) -> Optional[Property]:
        key = ("property", property_id)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        property = await self.inner.get_property(property_id)
        if property is not None:
            self.cache.set(key, property)
        return property

    async def get_user(self, user_id: UUID) -> Optional[UserAccount]:
        key = ("user", user_id)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        user = await self.inner.get_user(user_id)
        if user is not None:
            self.cache.set(key, user)
        return user

    async def save_property(self, property: Property) -> Property:
        saved = await self.inner.save_property(property)
        self.invalidate_property(property.id)
        return saved

    async def save_user(self, user: UserAccount) -> UserAccount:
        saved = await self.inner.save_user(user)
        self.invalidate_user(user.id)
        return saved

    def invalidate_property(self, property_id: UUID) -> None:
        self.cache.invalidate(("property", property_id))
        self.logger.debug(f"Invalidated property {property_id}")

    def invalidate_user(self, user_id: UUID) -> None:
        self.cache.invalidate(("user", user_id))
