"""In-memory adapters used to exercise the workflow without a database, plus a SQLite session helper."""

import copy
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Callable, Optional
from uuid import UUID

from application.interfaces import (
    AuditEvent,
    IAuditLogger,
    ICreditBureau,
    IDocumentGenerator,
    INotificationDispatcher,
    IPaymentGateway,
)
from domain.entities import Application, LeaseSignature, Property, UserAccount
from domain.enums import DocumentKind, LeaseSignatureStatus
from domain.errors import AlreadySigned, DuplicateApplication
from domain.repositories import (
    IApplicationRepository,
    ILeaseSignatureRepository,
    IPropertyRepository,
)
from infrastructure.config import Settings
from infrastructure.database import create_engine, create_session_factory, init_db


class InMemoryApplicationRepository(IApplicationRepository):
    """
    Stores copies of applications and enforces the version check on save.

    ``before_next_save`` lets a test change the stored row right before the
    next save, as a competing request would.
    """

    def __init__(self):
        self.items: dict[UUID, Application] = {}
        self.save_calls = 0
        self.before_next_save: Optional[Callable[[Application], None]] = None

    async def create(self, application: Application) -> Application:
        for stored in self.items.values():
            if stored.user_id == application.user_id and stored.property_id == application.property_id:
                raise DuplicateApplication("You have already applied for this property.")
        self.items[application.id] = copy.deepcopy(application)
        return copy.deepcopy(application)

    async def get_by_id(self, application_id: UUID) -> Optional[Application]:
        stored = self.items.get(application_id)
        return copy.deepcopy(stored) if stored else None

    async def find_by_user_and_property(self, user_id: UUID, property_id: UUID) -> Optional[Application]:
        for stored in self.items.values():
            if stored.user_id == user_id and stored.property_id == property_id:
                return copy.deepcopy(stored)
        return None

    async def list_by_user(self, user_id: UUID) -> list[Application]:
        return self._newest_first(app for app in self.items.values() if app.user_id == user_id)

    async def list_by_property(self, property_id: UUID) -> list[Application]:
        return self._newest_first(app for app in self.items.values() if app.property_id == property_id)

    async def save(self, application: Application, expected_version: int) -> Optional[Application]:
        self.save_calls += 1
        hook, self.before_next_save = self.before_next_save, None
        if hook is not None:
            hook(self.items[application.id])

        stored = self.items.get(application.id)
        if stored is None or stored.version != expected_version:
            return None

        updated = copy.deepcopy(application)
        updated.version = expected_version + 1
        self.items[application.id] = updated
        return copy.deepcopy(updated)

    async def update_lease_signature_status(
        self,
        application_id: UUID,
        status: LeaseSignatureStatus,
        fully_signed_at: Optional[datetime] = None
    ) -> Optional[Application]:
        stored = self.items.get(application_id)
        if stored is None:
            return None
        if stored.lease_signature_status != LeaseSignatureStatus.SIGNED:
            stored.lease_signature_status = status
            if fully_signed_at is not None:
                stored.lease_fully_signed_at = fully_signed_at
            stored.version += 1
        return copy.deepcopy(stored)

    async def set_document_url_if_empty(self, application_id: UUID, document: DocumentKind, url: str) -> bool:
        stored = self.items[application_id]
        if getattr(stored, document.value) is not None:
            return False
        setattr(stored, document.value, url)
        stored.version += 1
        return True

    async def release_document_url(self, application_id: UUID, document: DocumentKind, url: str) -> None:
        stored = self.items[application_id]
        if getattr(stored, document.value) == url:
            setattr(stored, document.value, None)
            stored.version += 1

    @staticmethod
    def _newest_first(applications) -> list[Application]:
        ordered = sorted(applications, key=lambda app: app.created_at, reverse=True)
        return [copy.deepcopy(app) for app in ordered]


class InMemoryLeaseSignatureRepository(ILeaseSignatureRepository):
    def __init__(self):
        self.rows: list[LeaseSignature] = []

    async def create(self, signature: LeaseSignature) -> LeaseSignature:
        for row in self.rows:
            if row.application_id == signature.application_id and row.signer_role == signature.signer_role:
                raise AlreadySigned(f"The {signature.signer_role.value} has already signed this lease")
        self.rows.append(signature)
        return signature

    async def list_by_application(self, application_id: UUID) -> list[LeaseSignature]:
        rows = [row for row in self.rows if row.application_id == application_id]
        return sorted(rows, key=lambda row: row.signed_at)


class InMemoryPropertyRepository(IPropertyRepository):
    def __init__(self, properties=(), users=()):
        self.properties: dict[UUID, Property] = {p.id: p for p in properties}
        self.users: dict[UUID, UserAccount] = {u.id: u for u in users}
        self.property_lookups = 0

    async def get_property(self, property_id: UUID) -> Optional[Property]:
        self.property_lookups += 1
        return copy.deepcopy(self.properties.get(property_id))

    async def get_user(self, user_id: UUID) -> Optional[UserAccount]:
        return self.users.get(user_id)

    async def save_property(self, property: Property) -> Property:
        self.properties[property.id] = copy.deepcopy(property)
        return property

    async def save_user(self, user: UserAccount) -> UserAccount:
        self.users[user.id] = user
        return user


class FakeCreditBureau(ICreditBureau):
    def __init__(self, score: int = 760):
        self.score = score
        self.identifiers: list[str] = []

    async def fetch_credit_score(self, identifier: str) -> int:
        self.identifiers.append(identifier)
        return self.score


class FakePaymentGateway(IPaymentGateway):
    def __init__(self):
        self.intents: list[tuple[str, str, str]] = []

    async def create_intent(self, amount: str, purpose: str, reference: str) -> str:
        self.intents.append((amount, purpose, reference))
        return f"pi_test_{len(self.intents)}"


class RecordingNotifier(INotificationDispatcher):
    """
    Records every notification.

    Set ``error`` to make each call raise, or ``delivered`` to False to
    report the hand-off as failed.
    """

    def __init__(self):
        self.sent: list[tuple] = []
        self.error: Optional[Exception] = None
        self.delivered = True

    async def _record(self, *entry) -> bool:
        self.sent.append(entry)
        if self.error is not None:
            raise self.error
        return self.delivered

    def names(self) -> list[str]:
        return [entry[0] for entry in self.sent]

    async def notify_owner_of_new_application(self, application, property) -> bool:
        return await self._record("owner_new_application", application.id)

    async def send_applicant_confirmation(self, application, property) -> bool:
        return await self._record("applicant_confirmation", application.id)

    async def send_status_change_notification(self, application, property, previous_status, new_status) -> bool:
        return await self._record("status_change", application.id, previous_status, new_status)

    async def notify_owner_of_scoring_complete(self, application, property) -> bool:
        return await self._record("scoring_complete", application.id)

    async def send_lease_signature_complete_notification(self, application, property) -> bool:
        return await self._record("lease_signed", application.id)


class RecordingAuditLogger(IAuditLogger):
    def __init__(self):
        self.events: list[AuditEvent] = []
        self.error: Optional[Exception] = None

    async def record(self, event: AuditEvent) -> None:
        if self.error is not None:
            raise self.error
        self.events.append(event)

    def actions(self) -> list[str]:
        return [event.action for event in self.events]


class FakeDocumentGenerator(IDocumentGenerator):
    """Counts renders per document kind; ``fail`` makes rendering raise."""

    def __init__(self):
        self.rendered: list[tuple[UUID, DocumentKind]] = []
        self.fail = False

    def document_url(self, application_id: UUID, document: DocumentKind) -> str:
        return f"https://docs.test/{application_id}/{document.slug}.pdf"

    def _render(self, application: Application, document: DocumentKind, url: str) -> str:
        if self.fail:
            raise RuntimeError("renderer unavailable")
        self.rendered.append((application.id, document))
        return url

    async def generate_disclosure_pdf(self, application, property, url: str) -> str:
        return self._render(application, DocumentKind.DISCLOSURE, url)

    async def generate_lease_pdf(self, application, property, url: str) -> str:
        return self._render(application, DocumentKind.LEASE, url)

    async def generate_signed_lease_pdf(self, application, property, signatures, esignature_disclosure, url) -> str:
        return self._render(application, DocumentKind.SIGNED_LEASE, url)

    def count(self, document: DocumentKind) -> int:
        return sum(1 for _, kind in self.rendered if kind == document)


def complete_sections(state_disclosures: Optional[dict] = None) -> dict:
    """Applicant sections that pass submission and score 100 with a 760 bureau score."""
    return {
        "personal_info": {
            "first_name": "Dana",
            "last_name": "Reyes",
            "email": "dana@example.com",
            "phone": "555-0100",
            "ssn": "123-45-6789",
        },
        "employment": {
            "employer_name": "Acme Logistics",
            "job_title": "Dispatcher",
            "monthly_income": 5200,
            "duration": "3 years",
        },
        "rental_history": {
            "current_address": "12 Elm St",
            "landlord_name": "Pat Lee",
            "duration": "4 years",
            "has_eviction": False,
        },
        "documents": {
            "id": {"uploaded": True, "verified": True},
            "proof_of_income": {"uploaded": True, "verified": True},
            "employment_verification": {"uploaded": True, "verified": True},
        },
        "legal_disclosures": {
            "fair_housing_acknowledged": True,
            "credit_check_authorized": True,
            "accuracy_certified": True,
            "fee_acknowledged": True,
        },
        "state_disclosures": state_disclosures or {"no_rent_control": {"acknowledged": True}},
    }


@asynccontextmanager
async def sqlite_sessions():
    """Session factory bound to a fresh in-memory SQLite database."""
    engine = create_engine(Settings(_env_file=None, database_url="sqlite+aiosqlite:///:memory:"))
    await init_db(engine)
    try:
        yield create_session_factory(engine)
    finally:
        await engine.dispose()
