"""Read-only views of properties and user accounts used by the workflow."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
from uuid import UUID

from domain.enums import UserRole
from domain.value_objects import PolicySnapshot, PropertySnapshot


@dataclass
class Property:
    """
    Property listing as seen by the application workflow.

    Only the fields needed for authorization, snapshotting and
    state-specific disclosures are carried.
    """

    id: UUID
    owner_id: UUID
    title: str
    manager_id: Optional[UUID] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    property_type: Optional[str] = None
    price: Optional[str] = None
    deposit: Optional[str] = None
    application_fee: Optional[str] = None
    lease_term: Optional[str] = None
    available_date: Optional[datetime] = None
    pet_policy: Optional[str] = None
    smoking_policy: Optional[str] = None
    occupancy_limit: Optional[int] = None
    utilities_included: list[str] = field(default_factory=list)
    rules_text: Optional[str] = None
    listing_status: Optional[str] = "available"
    version: int = 1

    def snapshot(self, default_fee: str, default_lease_term: str) -> PropertySnapshot:
        """Capture the terms an application is created against."""
        return PropertySnapshot(
            rent=self.price,
            deposit=self.deposit,
            application_fee=self.application_fee or default_fee,
            lease_term=self.lease_term or default_lease_term,
            available_date=self.available_date,
            title=self.title,
            address=self.address,
            property_type=self.property_type,
            policies=PolicySnapshot(
                pet_policy=self.pet_policy,
                smoking_policy=self.smoking_policy,
                occupancy_limit=self.occupancy_limit or 2,
                utilities_included=tuple(self.utilities_included),
                rules_text=self.rules_text,
            ),
            property_version=self.version,
            listing_status=self.listing_status,
        )


@dataclass
class UserAccount:
    """Marketplace account referenced by applications."""

    id: UUID
    email: str
    role: UserRole
    full_name: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.full_name or self.email
