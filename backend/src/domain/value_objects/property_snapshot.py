"""Pricing, terms and policies captured when an application is created."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ._serialization import dump_datetime, load_datetime


@dataclass(frozen=True)
class PolicySnapshot:
    """House rules of the property at apply time."""

    pet_policy: Optional[str] = None
    smoking_policy: Optional[str] = None
    occupancy_limit: int = 2
    utilities_included: tuple[str, ...] = ()
    rules_text: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "pet_policy": self.pet_policy,
            "smoking_policy": self.smoking_policy,
            "occupancy_limit": self.occupancy_limit,
            "utilities_included": list(self.utilities_included),
            "rules_text": self.rules_text,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PolicySnapshot":
        return cls(
            pet_policy=data.get("pet_policy"),
            smoking_policy=data.get("smoking_policy"),
            occupancy_limit=data.get("occupancy_limit") or 2,
            utilities_included=tuple(data.get("utilities_included") or ()),
            rules_text=data.get("rules_text"),
        )


@dataclass(frozen=True)
class PropertySnapshot:
    """
    Immutable copy of the property terms an applicant applied against.

    Later edits to the listing never reach an in-flight application.

    Attributes:
        rent: Monthly rent as a decimal string
        deposit: Security deposit as a decimal string
        application_fee: Application fee as a decimal string
        lease_term: Human readable lease term
        available_date: Move-in availability
        title: Listing title
        address: Street address
        property_type: Listing type
        policies: House rules
        property_version: Listing version at apply time
        listing_status: Listing status at apply time
    """

    rent: Optional[str] = None
    deposit: Optional[str] = None
    application_fee: Optional[str] = None
    lease_term: Optional[str] = None
    available_date: Optional[datetime] = None
    title: Optional[str] = None
    address: Optional[str] = None
    property_type: Optional[str] = None
    policies: PolicySnapshot = field(default_factory=PolicySnapshot)
    property_version: int = 1
    listing_status: Optional[str] = None

    def is_complete(self) -> bool:
        """A usable snapshot carries at least the rent and the listing title."""
        return bool(self.rent and self.title)

    def to_dict(self) -> dict:
        return {
            "rent": self.rent,
            "deposit": self.deposit,
            "application_fee": self.application_fee,
            "lease_term": self.lease_term,
            "available_date": dump_datetime(self.available_date),
            "title": self.title,
            "address": self.address,
            "property_type": self.property_type,
            "policies": self.policies.to_dict(),
            "property_version": self.property_version,
            "listing_status": self.listing_status,
        }

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "PropertySnapshot":
        data = data or {}
        return cls(
            rent=data.get("rent"),
            deposit=data.get("deposit"),
            application_fee=data.get("application_fee"),
            lease_term=data.get("lease_term"),
            available_date=load_datetime(data.get("available_date")),
            title=data.get("title"),
            address=data.get("address"),
            property_type=data.get("property_type"),
            policies=PolicySnapshot.from_dict(data.get("policies") or {}),
            property_version=data.get("property_version") or 1,
            listing_status=data.get("listing_status"),
        )
