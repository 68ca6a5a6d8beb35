"""SQLAlchemy implementation of the application repository."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities import Application, utc_now
from domain.enums import (
    ApplicationStatus,
    DocumentKind,
    LeaseSignatureStatus,
    RejectionCategory,
)
from domain.errors import DuplicateApplication
from domain.repositories import IApplicationRepository
from domain.value_objects import (
    Employment,
    LegalAcceptance,
    LegalDisclosures,
    PaymentRequest,
    PersonalInfo,
    PropertySnapshot,
    RejectionDetails,
    RentalHistory,
    ScoreBreakdown,
    StatusHistory,
    parse_co_applicants,
    parse_document_status,
    parse_state_disclosures,
)
from infrastructure.database.session import as_utc
from infrastructure.database.models import ApplicationModel


class SQLAlchemyApplicationRepository(IApplicationRepository):
    """Concrete implementation of IApplicationRepository using SQLAlchemy."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    async def create(self, application: Application) -> Application:
        """Insert a new application; the unique constraint rejects duplicates."""
        model = ApplicationModel(id=application.id, **self._entity_to_values(application))
        model.version = application.version
        try:
            async with self.session.begin_nested():
                self.session.add(model)
                await self.session.flush()
        except IntegrityError:
            raise DuplicateApplication(
                "You have already applied for this property. Please check your applications."
            )
        await self.session.refresh(model)
        return self._model_to_entity(model)

    async def get_by_id(self, application_id: UUID) -> Optional[Application]:
        """Retrieve an application by ID."""
        stmt = (
            select(ApplicationModel)
            .where(ApplicationModel.id == application_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return self._model_to_entity(model)

    async def find_by_user_and_property(
        self,
        user_id: UUID,
        property_id: UUID
    ) -> Optional[Application]:
        """Retrieve the application of a user for a property."""
        stmt = (
            select(ApplicationModel)
            .where(
                ApplicationModel.user_id == user_id,
                ApplicationModel.property_id == property_id,
            )
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._model_to_entity(model) if model else None

    async def list_by_user(self, user_id: UUID) -> list[Application]:
        stmt = (
            select(ApplicationModel)
            .where(ApplicationModel.user_id == user_id)
            .order_by(ApplicationModel.created_at.desc())
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return [self._model_to_entity(model) for model in result.scalars().all()]

    async def list_by_property(self, property_id: UUID) -> list[Application]:
        stmt = (
            select(ApplicationModel)
            .where(ApplicationModel.property_id == property_id)
            .order_by(ApplicationModel.created_at.desc())
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return [self._model_to_entity(model) for model in result.scalars().all()]

    async def save(
        self,
        application: Application,
        expected_version: int
    ) -> Optional[Application]:
        """Compare-and-set write on the version column."""
        stmt = (
            update(ApplicationModel)
            .where(
                ApplicationModel.id == application.id,
                ApplicationModel.version == expected_version,
            )
            .values(**self._entity_to_values(application), version=expected_version + 1)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        if result.rowcount != 1:
            return None
        return await self.get_by_id(application.id)

    async def update_lease_signature_status(
        self,
        application_id: UUID,
        status: LeaseSignatureStatus,
        fully_signed_at: Optional[datetime] = None
    ) -> Optional[Application]:
        values = {
            "lease_signature_status": status.value,
            "updated_at": utc_now(),
            "version": ApplicationModel.version + 1,
        }
        if fully_signed_at is not None:
            values["lease_fully_signed_at"] = fully_signed_at

        stmt = (
            update(ApplicationModel)
            .where(
                ApplicationModel.id == application_id,
                or_(
                    ApplicationModel.lease_signature_status.is_(None),
                    ApplicationModel.lease_signature_status != LeaseSignatureStatus.SIGNED.value,
                ),
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(stmt)
        return await self.get_by_id(application_id)

    async def set_document_url_if_empty(
        self,
        application_id: UUID,
        document: DocumentKind,
        url: str
    ) -> bool:
        column = getattr(ApplicationModel, document.value)
        stmt = (
            update(ApplicationModel)
            .where(ApplicationModel.id == application_id, column.is_(None))
            .values({column: url, ApplicationModel.version: ApplicationModel.version + 1})
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def release_document_url(
        self,
        application_id: UUID,
        document: DocumentKind,
        url: str
    ) -> None:
        column = getattr(ApplicationModel, document.value)
        stmt = (
            update(ApplicationModel)
            .where(ApplicationModel.id == application_id, column == url)
            .values({column: None, ApplicationModel.version: ApplicationModel.version + 1})
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(stmt)

    def _entity_to_values(self, entity: Application) -> dict:
        """Convert a domain entity to column values (everything but id and version)."""
        return {
            "user_id": entity.user_id,
            "property_id": entity.property_id,
            "status": entity.status.value,
            "previous_status": entity.previous_status.value if entity.previous_status else None,
            "status_history": entity.status_history.to_list(),
            "score": entity.score,
            "score_breakdown": entity.score_breakdown.to_dict() if entity.score_breakdown else None,
            "scored_at": entity.scored_at,
            "personal_info": entity.personal_info.to_dict() if entity.personal_info else None,
            "employment": entity.employment.to_dict() if entity.employment else None,
            "co_applicants": [co.to_dict() for co in entity.co_applicants],
            "rental_history": entity.rental_history.to_dict() if entity.rental_history else None,
            "documents": {name: doc.to_dict() for name, doc in entity.documents.items()},
            "legal_disclosures": entity.legal_disclosures.to_dict(),
            "legal_acceptance": entity.legal_acceptance.to_dict() if entity.legal_acceptance else None,
            "state_disclosures": {key: ack.to_dict() for key, ack in entity.state_disclosures.items()},
            "last_saved_step": entity.last_saved_step,
            "snapshot": entity.snapshot.to_dict() if entity.snapshot else None,
            "payment_request": entity.payment_request.to_dict() if entity.payment_request else None,
            "rejection_category": entity.rejection_category.value if entity.rejection_category else None,
            "rejection_reason": entity.rejection_reason,
            "rejection_details": entity.rejection_details.to_dict() if entity.rejection_details else None,
            "reviewed_by": entity.reviewed_by,
            "reviewed_at": entity.reviewed_at,
            "disclosure_pdf_url": entity.disclosure_pdf_url,
            "lease_pdf_url": entity.lease_pdf_url,
            "signed_lease_pdf_url": entity.signed_lease_pdf_url,
            "lease_signature_status": (
                entity.lease_signature_status.value if entity.lease_signature_status else None
            ),
            "lease_fully_signed_at": entity.lease_fully_signed_at,
            "submitted_at": entity.submitted_at,
            "created_at": entity.created_at,
            "updated_at": entity.updated_at,
        }

    def _model_to_entity(self, model: ApplicationModel) -> Application:
        """Convert ORM model to domain entity."""
        return Application(
            id=model.id,
            user_id=model.user_id,
            property_id=model.property_id,
            status=ApplicationStatus(model.status),
            previous_status=ApplicationStatus(model.previous_status) if model.previous_status else None,
            score=model.score,
            score_breakdown=ScoreBreakdown.from_dict(model.score_breakdown) if model.score_breakdown else None,
            scored_at=as_utc(model.scored_at),
            status_history=StatusHistory.from_list(model.status_history),
            personal_info=PersonalInfo.from_dict(model.personal_info) if model.personal_info else None,
            employment=Employment.from_dict(model.employment) if model.employment else None,
            co_applicants=parse_co_applicants(model.co_applicants),
            rental_history=RentalHistory.from_dict(model.rental_history) if model.rental_history else None,
            documents=parse_document_status(model.documents),
            legal_disclosures=LegalDisclosures.from_dict(model.legal_disclosures or {}),
            legal_acceptance=LegalAcceptance.from_dict(model.legal_acceptance) if model.legal_acceptance else None,
            state_disclosures=parse_state_disclosures(model.state_disclosures),
            last_saved_step=model.last_saved_step,
            snapshot=PropertySnapshot.from_dict(model.snapshot) if model.snapshot else None,
            payment_request=PaymentRequest.from_dict(model.payment_request) if model.payment_request else None,
            rejection_category=(
                RejectionCategory(model.rejection_category) if model.rejection_category else None
            ),
            rejection_reason=model.rejection_reason,
            rejection_details=(
                RejectionDetails.from_dict(model.rejection_details) if model.rejection_details else None
            ),
            reviewed_by=model.reviewed_by,
            reviewed_at=as_utc(model.reviewed_at),
            disclosure_pdf_url=model.disclosure_pdf_url,
            lease_pdf_url=model.lease_pdf_url,
            signed_lease_pdf_url=model.signed_lease_pdf_url,
            lease_signature_status=(
                LeaseSignatureStatus(model.lease_signature_status) if model.lease_signature_status else None
            ),
            lease_fully_signed_at=as_utc(model.lease_fully_signed_at),
            submitted_at=as_utc(model.submitted_at),
            created_at=as_utc(model.created_at),
            updated_at=as_utc(model.updated_at),
            version=model.version,
        )
