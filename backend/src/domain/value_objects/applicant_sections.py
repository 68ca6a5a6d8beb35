"""Structured applicant-supplied sections of a rental application.

Each section is a versioned record with explicit optional fields. Incoming
payloads are parsed with ``from_dict`` which tolerates the aliases older
clients still send; ``to_dict`` always writes the current schema.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Optional

from ._serialization import (
    dump_datetime,
    first_present,
    load_bool,
    load_datetime,
    load_float,
)

SECTION_SCHEMA_VERSION = 1

REDACTED = "REDACTED"


@dataclass(frozen=True)
class PersonalInfo:
    """
    Applicant identity and contact details.

    Attributes:
        first_name: Given name
        last_name: Family name
        email: Contact email
        phone: Contact phone
        date_of_birth: Free-form date of birth
        ssn: Credit-check identifier (digits only); never returned unredacted
    """

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    date_of_birth: Optional[str] = None
    ssn: Optional[str] = None
    schema_version: int = SECTION_SCHEMA_VERSION

    @property
    def has_credit_identifier(self) -> bool:
        return bool(self.ssn) and self.ssn != REDACTED

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)

    def redacted(self) -> "PersonalInfo":
        """Copy with the credit identifier masked."""
        if not self.ssn:
            return self
        return replace(self, ssn=REDACTED)

    @classmethod
    def from_dict(cls, data: dict) -> "PersonalInfo":
        return cls(
            first_name=first_present(data, "first_name", "firstName"),
            last_name=first_present(data, "last_name", "lastName"),
            email=data.get("email"),
            phone=data.get("phone"),
            date_of_birth=first_present(data, "date_of_birth", "dateOfBirth"),
            ssn=_normalize_ssn(first_present(data, "ssn", "ssn_provided", "ssnProvided")),
            schema_version=data.get("schema_version", SECTION_SCHEMA_VERSION),
        )

    def to_dict(self) -> dict:
        return {
            "schema_version": self.schema_version,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
            "phone": self.phone,
            "date_of_birth": self.date_of_birth,
            "ssn": self.ssn,
        }


def _normalize_ssn(value) -> Optional[str]:
    if value is None or value is True or value is False:
        return None
    text = str(value).strip()
    if not text:
        return None
    if text == REDACTED or "*" in text:
        return REDACTED
    digits = "".join(ch for ch in text if ch.isdigit())
    return digits or None


@dataclass(frozen=True)
class Employment:
    """
    Current employment of the primary applicant.

    ``duration`` is the free-text tenure ("2 years", "18 months").
    """

    employer_name: Optional[str] = None
    job_title: Optional[str] = None
    monthly_income: Optional[float] = None
    employed: Optional[bool] = None
    status: Optional[str] = None
    duration: Optional[str] = None
    schema_version: int = SECTION_SCHEMA_VERSION

    @property
    def is_employed(self) -> bool:
        return self.employed is not False and (self.status or "").lower() != "unemployed"

    @classmethod
    def from_dict(cls, data: dict) -> "Employment":
        duration = first_present(
            data, "duration", "years_employed", "yearsEmployed", "employment_length", "employmentLength"
        )
        return cls(
            employer_name=first_present(data, "employer_name", "employerName", "employer"),
            job_title=first_present(data, "job_title", "jobTitle", "position"),
            monthly_income=load_float(first_present(data, "monthly_income", "monthlyIncome", "income")),
            employed=load_bool(data.get("employed")),
            status=str(data["status"]) if data.get("status") is not None else None,
            duration=str(duration) if duration is not None else None,
            schema_version=data.get("schema_version", SECTION_SCHEMA_VERSION),
        )

    def to_dict(self) -> dict:
        return {
            "schema_version": self.schema_version,
            "employer_name": self.employer_name,
            "job_title": self.job_title,
            "monthly_income": self.monthly_income,
            "employed": self.employed,
            "status": self.status,
            "duration": self.duration,
        }


@dataclass(frozen=True)
class CoApplicant:
    """Additional adult on the application contributing income."""

    full_name: Optional[str] = None
    email: Optional[str] = None
    relationship: Optional[str] = None
    monthly_income: Optional[float] = None

    @classmethod
    def from_dict(cls, data: dict) -> "CoApplicant":
        return cls(
            full_name=first_present(data, "full_name", "fullName", "name"),
            email=data.get("email"),
            relationship=data.get("relationship"),
            monthly_income=load_float(first_present(data, "monthly_income", "monthlyIncome", "income")),
        )

    def to_dict(self) -> dict:
        return {
            "full_name": self.full_name,
            "email": self.email,
            "relationship": self.relationship,
            "monthly_income": self.monthly_income,
        }


@dataclass(frozen=True)
class RentalHistory:
    """Previous tenancy of the applicant."""

    current_address: Optional[str] = None
    landlord_name: Optional[str] = None
    landlord_phone: Optional[str] = None
    duration: Optional[str] = None
    has_eviction: bool = False
    schema_version: int = SECTION_SCHEMA_VERSION

    @classmethod
    def from_dict(cls, data: dict) -> "RentalHistory":
        duration = first_present(data, "duration", "years_renting", "yearsRenting")
        return cls(
            current_address=first_present(data, "current_address", "currentAddress", "address"),
            landlord_name=first_present(data, "landlord_name", "landlordName"),
            landlord_phone=first_present(data, "landlord_phone", "landlordPhone"),
            duration=str(duration) if duration is not None else None,
            has_eviction=bool(
                load_bool(first_present(data, "has_eviction", "hasEviction", "evicted")) or False
            ),
            schema_version=data.get("schema_version", SECTION_SCHEMA_VERSION),
        )

    def to_dict(self) -> dict:
        return {
            "schema_version": self.schema_version,
            "current_address": self.current_address,
            "landlord_name": self.landlord_name,
            "landlord_phone": self.landlord_phone,
            "duration": self.duration,
            "has_eviction": self.has_eviction,
        }


@dataclass(frozen=True)
class DocumentStatus:
    """Upload and verification state of one checklist document."""

    uploaded: bool = False
    verified: bool = False
    verified_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: dict) -> "DocumentStatus":
        return cls(
            uploaded=bool(load_bool(data.get("uploaded")) or False),
            verified=bool(load_bool(data.get("verified")) or False),
            verified_at=load_datetime(first_present(data, "verified_at", "verifiedAt")),
        )

    def to_dict(self) -> dict:
        return {
            "uploaded": self.uploaded,
            "verified": self.verified,
            "verified_at": dump_datetime(self.verified_at),
        }


@dataclass(frozen=True)
class LegalDisclosures:
    """The four federal disclosures every applicant must acknowledge."""

    fair_housing_acknowledged: bool = False
    credit_check_authorized: bool = False
    accuracy_certified: bool = False
    fee_acknowledged: bool = False
    acknowledged_at: Optional[datetime] = None

    @property
    def all_acknowledged(self) -> bool:
        return all((
            self.fair_housing_acknowledged,
            self.credit_check_authorized,
            self.accuracy_certified,
            self.fee_acknowledged,
        ))

    @classmethod
    def from_dict(cls, data: dict) -> "LegalDisclosures":
        def flag(*keys: str) -> bool:
            return bool(load_bool(first_present(data, *keys)) or False)

        return cls(
            fair_housing_acknowledged=flag("fair_housing_acknowledged", "fairHousingAcknowledged"),
            credit_check_authorized=flag("credit_check_authorized", "creditCheckAuthorized"),
            accuracy_certified=flag("accuracy_certified", "accuracyCertified"),
            fee_acknowledged=flag("fee_acknowledged", "feeAcknowledged"),
            acknowledged_at=load_datetime(first_present(data, "acknowledged_at", "acknowledgedAt")),
        )

    def to_dict(self) -> dict:
        return {
            "fair_housing_acknowledged": self.fair_housing_acknowledged,
            "credit_check_authorized": self.credit_check_authorized,
            "accuracy_certified": self.accuracy_certified,
            "fee_acknowledged": self.fee_acknowledged,
            "acknowledged_at": dump_datetime(self.acknowledged_at),
        }


@dataclass(frozen=True)
class StateDisclosureAck:
    """Acknowledgment of one state-specific disclosure."""

    acknowledged: bool = False
    acknowledged_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: dict) -> "StateDisclosureAck":
        return cls(
            acknowledged=bool(load_bool(data.get("acknowledged")) or False),
            acknowledged_at=load_datetime(first_present(data, "acknowledged_at", "acknowledgedAt")),
        )

    def to_dict(self) -> dict:
        return {
            "acknowledged": self.acknowledged,
            "acknowledged_at": dump_datetime(self.acknowledged_at),
        }


@dataclass(frozen=True)
class StateDisclosure:
    """A disclosure a state requires applicants to acknowledge."""

    id: str
    label: str
    text: str = ""


def parse_document_status(data: Optional[dict]) -> dict[str, DocumentStatus]:
    return {key: DocumentStatus.from_dict(value or {}) for key, value in (data or {}).items()}


def parse_state_disclosures(data: Optional[dict]) -> dict[str, StateDisclosureAck]:
    return {key: StateDisclosureAck.from_dict(value or {}) for key, value in (data or {}).items()}


def parse_co_applicants(data: Optional[list]) -> list[CoApplicant]:
    return [CoApplicant.from_dict(item or {}) for item in (data or [])]
