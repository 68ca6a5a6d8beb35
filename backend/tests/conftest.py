"""Pytest configuration and shared fixtures."""

import asyncio
from uuid import uuid4

import pytest

from application.services import (
    AccessPolicy,
    LeaseSignatureCoordinator,
    PaymentRequestCoordinator,
    ScoringEngine,
    TransitionValidator,
)
from application.use_cases import ApplicationWorkflowService
from domain.entities import Property
from domain.enums import UserRole
from domain.value_objects import Actor
from infrastructure.config import Settings
from infrastructure.disclosures import StaticDisclosureRegistry

from fakes import (
    FakeCreditBureau,
    FakeDocumentGenerator,
    FakePaymentGateway,
    InMemoryApplicationRepository,
    InMemoryLeaseSignatureRepository,
    InMemoryPropertyRepository,
    RecordingAuditLogger,
    RecordingNotifier,
)


@pytest.fixture
def run():
    """Run a coroutine to completion on a fresh event loop."""
    return asyncio.run


@pytest.fixture
def settings():
    return Settings(_env_file=None, smtp_server=None, credit_bureau_provider="mock")


@pytest.fixture
def renter():
    """Applicant account."""
    return Actor(user_id=uuid4(), role=UserRole.RENTER, ip_address="203.0.113.7", user_agent="pytest")


@pytest.fixture
def owner():
    """Landlord who owns the listed property."""
    return Actor(user_id=uuid4(), role=UserRole.LANDLORD, ip_address="198.51.100.2")


@pytest.fixture
def manager():
    """Property manager assigned to the listed property."""
    return Actor(user_id=uuid4(), role=UserRole.PROPERTY_MANAGER)


@pytest.fixture
def admin():
    return Actor(user_id=uuid4(), role=UserRole.ADMIN)


@pytest.fixture
def stranger():
    """Renter with no relation to the application."""
    return Actor(user_id=uuid4(), role=UserRole.RENTER)


@pytest.fixture
def listing(owner, manager):
    """Texas listing (one required state disclosure)."""
    return Property(
        id=uuid4(),
        owner_id=owner.user_id,
        manager_id=manager.user_id,
        title="Sunny 2BR near the park",
        address="48 Oak Avenue",
        city="Austin",
        state="TX",
        property_type="apartment",
        price="2400.00",
        deposit="2400.00",
        pet_policy="cats allowed",
        occupancy_limit=4,
        utilities_included=["water", "trash"],
    )


@pytest.fixture
def applications():
    return InMemoryApplicationRepository()


@pytest.fixture
def signatures():
    return InMemoryLeaseSignatureRepository()


@pytest.fixture
def properties(listing):
    return InMemoryPropertyRepository(properties=[listing])


@pytest.fixture
def credit_bureau():
    return FakeCreditBureau(score=760)


@pytest.fixture
def gateway():
    return FakePaymentGateway()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def audit():
    return RecordingAuditLogger()


@pytest.fixture
def documents():
    return FakeDocumentGenerator()


@pytest.fixture
def disclosures():
    return StaticDisclosureRegistry()


@pytest.fixture
def validator(disclosures):
    return TransitionValidator(disclosures)


@pytest.fixture
def service(
    applications,
    signatures,
    properties,
    credit_bureau,
    gateway,
    notifier,
    audit,
    documents,
    disclosures,
    validator,
    settings,
):
    """Workflow service wired to in-memory adapters."""
    return ApplicationWorkflowService(
        application_repository=applications,
        signature_repository=signatures,
        property_repository=properties,
        scoring_engine=ScoringEngine(credit_bureau),
        transition_validator=validator,
        payment_coordinator=PaymentRequestCoordinator(applications, validator, gateway),
        lease_coordinator=LeaseSignatureCoordinator(applications, signatures, disclosures, documents),
        access_policy=AccessPolicy(),
        document_generator=documents,
        notification_dispatcher=notifier,
        audit_logger=audit,
        settings=settings,
    )
