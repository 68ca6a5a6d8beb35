"""Property and user lookup interface - Abstract definition."""

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from domain.entities import Property, UserAccount


class IPropertyRepository(ABC):
    """
    Lookups of properties and accounts used for authorization and snapshots.
    """

    @abstractmethod
    async def get_property(self, property_id: UUID) -> Optional[Property]:
        """
        Retrieve a property by ID.

        Args:
            property_id: Property UUID

        Returns:
            Property if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_user(self, user_id: UUID) -> Optional[UserAccount]:
        """
        Retrieve a user account by ID.

        Args:
            user_id: User UUID

        Returns:
            UserAccount if found, None otherwise
        """
        pass

    @abstractmethod
    async def save_property(self, property: Property) -> Property:
        """Insert or update a property."""
        pass

    @abstractmethod
    async def save_user(self, user: UserAccount) -> UserAccount:
        """Insert or update a user account."""
        pass
