"""SQLAlchemy implementation of property and user lookups."""

from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities import Property, UserAccount
from domain.enums import UserRole
from domain.repositories import IPropertyRepository
from infrastructure.database.session import as_utc
from infrastructure.database.models import PropertyModel, UserModel


class SQLAlchemyPropertyRepository(IPropertyRepository):
    """Concrete implementation of IPropertyRepository using SQLAlchemy."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    async def get_property(self, property_id: UUID) -> Optional[Property]:
        result = await self.session.execute(select(PropertyModel).where(PropertyModel.id == property_id))
        model = result.scalar_one_or_none()
        return self._property_to_entity(model) if model else None

    async def get_user(self, user_id: UUID) -> Optional[UserAccount]:
        result = await self.session.execute(select(UserModel).where(UserModel.id == user_id))
        model = result.scalar_one_or_none()
        if model is None:
            return None
        return UserAccount(
            id=model.id,
            email=model.email,
            role=UserRole(model.role),
            full_name=model.full_name,
        )

    async def save_property(self, property: Property) -> Property:
        model = await self.session.get(PropertyModel, property.id)
        if model is None:
            model = PropertyModel(id=property.id)
            self.session.add(model)

        model.owner_id = property.owner_id
        model.manager_id = property.manager_id
        model.title = property.title
        model.address = property.address
        model.city = property.city
        model.state = property.state
        model.property_type = property.property_type
        model.price = property.price
        model.deposit = property.deposit
        model.application_fee = property.application_fee
        model.lease_term = property.lease_term
        model.available_date = property.available_date
        model.pet_policy = property.pet_policy
        model.smoking_policy = property.smoking_policy
        model.occupancy_limit = property.occupancy_limit
        model.utilities_included = list(property.utilities_included)
        model.rules_text = property.rules_text
        model.listing_status = property.listing_status
        model.version = property.version

        await self.session.flush()
        return self._property_to_entity(model)

    async def save_user(self, user: UserAccount) -> UserAccount:
        model = await self.session.get(UserModel, user.id)
        if model is None:
            model = UserModel(id=user.id)
            self.session.add(model)

        model.email = user.email
        model.full_name = user.full_name
        model.role = user.role.value

        await self.session.flush()
        return user

    def _property_to_entity(self, model: PropertyModel) -> Property:
        """Convert ORM model to domain entity."""
        return Property(
            id=model.id,
            owner_id=model.owner_id,
            manager_id=model.manager_id,
            title=model.title,
            address=model.address,
            city=model.city,
            state=model.state,
            property_type=model.property_type,
            price=model.price,
            deposit=model.deposit,
            application_fee=model.application_fee,
            lease_term=model.lease_term,
            available_date=as_utc(model.available_date),
            pet_policy=model.pet_policy,
            smoking_policy=model.smoking_policy,
            occupancy_limit=model.occupancy_limit,
            utilities_included=list(model.utilities_included or []),
            rules_text=model.rules_text,
            listing_status=model.listing_status,
            version=model.version,
        )
