"""FastAPI dependency injection setup."""

from typing import AsyncGenerator, Optional
from uuid import UUID

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from application.services import (
    AccessPolicy,
    LeaseSignatureCoordinator,
    PaymentRequestCoordinator,
    ScoringEngine,
    TransitionValidator,
)
from application.use_cases import ApplicationWorkflowService
from domain.enums import UserRole
from domain.value_objects import Actor
from infrastructure.cache import CachedPropertyRepository, TTLCache
from infrastructure.config import Settings, get_settings
from infrastructure.credit import create_credit_bureau
from infrastructure.database import get_session, get_session_factory
from infrastructure.database.repositories import (
    SQLAlchemyApplicationRepository,
    SQLAlchemyAuditLogger,
    SQLAlchemyLeaseSignatureRepository,
    SQLAlchemyPropertyRepository,
)
from infrastructure.disclosures import StaticDisclosureRegistry
from infrastructure.notifications import EmailNotificationDispatcher
from infrastructure.payments import create_payment_gateway
from infrastructure.reporting import EmailClient, LeaseDocumentGenerator

# Shared across requests so authorization lookups stay warm.
_lookup_cache: Optional[TTLCache] = None


def get_lookup_cache() -> TTLCache:
    global _lookup_cache
    if _lookup_cache is None:
        settings = get_settings()
        _lookup_cache = TTLCache(settings.lookup_cache_ttl_seconds, settings.lookup_cache_max_size)
    return _lookup_cache


_document_generator: Optional[LeaseDocumentGenerator] = None


def get_document_generator() -> LeaseDocumentGenerator:
    global _document_generator
    if _document_generator is None:
        settings = get_settings()
        _document_generator = LeaseDocumentGenerator(settings.document_output_dir, settings.document_base_url)
    return _document_generator


# Database session dependency
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency."""
    async for session in get_session():
        yield session


def get_actor(
    request: Request,
    x_user_id: UUID = Header(..., alias="X-User-Id"),
    x_user_role: UserRole = Header(..., alias="X-User-Role"),
) -> Actor:
    """Caller identity, as asserted by the authenticating gateway."""
    return Actor(
        user_id=x_user_id,
        role=x_user_role,
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )


def build_workflow_service(
    session: AsyncSession,
    settings: Settings,
    cache: TTLCache,
) -> ApplicationWorkflowService:
    """Wire the workflow service for one database session."""
    session_factory = get_session_factory()

    application_repo = SQLAlchemyApplicationRepository(session)
    signature_repo = SQLAlchemyLeaseSignatureRepository(session)
    property_repo = CachedPropertyRepository(SQLAlchemyPropertyRepository(session), cache)

    disclosures = StaticDisclosureRegistry()
    documents = get_document_generator()
    validator = TransitionValidator(disclosures)

    return ApplicationWorkflowService(
        application_repository=application_repo,
        signature_repository=signature_repo,
        property_repository=property_repo,
        scoring_engine=ScoringEngine(create_credit_bureau(settings)),
        transition_validator=validator,
        payment_coordinator=PaymentRequestCoordinator(
            application_repo, validator, create_payment_gateway(settings)
        ),
        lease_coordinator=LeaseSignatureCoordinator(
            application_repo, signature_repo, disclosures, documents
        ),
        access_policy=AccessPolicy(),
        document_generator=documents,
        notification_dispatcher=EmailNotificationDispatcher(EmailClient(settings), session_factory),
        audit_logger=SQLAlchemyAuditLogger(session_factory),
        settings=settings,
    )


async def get_workflow_service(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[ApplicationWorkflowService, None]:
    """Workflow service bound to the request session."""
    service = build_workflow_service(session, get_settings(), get_lookup_cache())
    yield service
    await service.wait_for_side_effects()
