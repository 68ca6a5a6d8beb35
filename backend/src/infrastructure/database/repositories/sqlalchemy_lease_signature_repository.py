"""SQLAlchemy implementation of the lease signature repository."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities import LeaseSignature
from domain.enums import SignerRole
from domain.errors import AlreadySigned
from domain.repositories import ILeaseSignatureRepository
from infrastructure.database.session import as_utc
from infrastructure.database.models import LeaseSignatureModel


class SQLAlchemyLeaseSignatureRepository(ILeaseSignatureRepository):
    """Insert-only signature store backed by a unique (application, role) constraint."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    async def create(self, signature: LeaseSignature) -> LeaseSignature:
        model = self._entity_to_model(signature)
        try:
            async with self.session.begin_nested():
                self.session.add(model)
                await self.session.flush()
        except IntegrityError:
            raise AlreadySigned(f"The {signature.signer_role.value} has already signed this lease")
        return self._model_to_entity(model)

    async def list_by_application(self, application_id: UUID) -> list[LeaseSignature]:
        stmt = (
            select(LeaseSignatureModel)
            .where(LeaseSignatureModel.application_id == application_id)
            .order_by(LeaseSignatureModel.signed_at)
        )
        result = await self.session.execute(stmt)
        return [self._model_to_entity(model) for model in result.scalars().all()]

    def _entity_to_model(self, entity: LeaseSignature) -> LeaseSignatureModel:
        """Convert domain entity to ORM model."""
        return LeaseSignatureModel(
            id=entity.id,
            application_id=entity.application_id,
            signer_user_id=entity.signer_user_id,
            signer_role=entity.signer_role.value,
            signer_name=entity.signer_name,
            signature_data=entity.signature_data,
            ip_address=entity.ip_address,
            user_agent=entity.user_agent,
            consent_esign=entity.consent_esign,
            consent_terms=entity.consent_terms,
            pet_policy_acknowledged=entity.pet_policy_acknowledged,
            vehicle_disclosure_acknowledged=entity.vehicle_disclosure_acknowledged,
            damage_disclosure_acknowledged=entity.damage_disclosure_acknowledged,
            state_code=entity.state_code,
            state_disclosure_acknowledged=entity.state_disclosure_acknowledged,
            attestation_text=entity.attestation_text,
            signed_at=entity.signed_at,
            is_locked=True,
        )

    def _model_to_entity(self, model: LeaseSignatureModel) -> LeaseSignature:
        """Convert ORM model to domain entity."""
        return LeaseSignature(
            id=model.id,
            application_id=model.application_id,
            signer_user_id=model.signer_user_id,
            signer_role=SignerRole(model.signer_role),
            signer_name=model.signer_name,
            signature_data=model.signature_data,
            ip_address=model.ip_address,
            user_agent=model.user_agent,
            consent_esign=model.consent_esign,
            consent_terms=model.consent_terms,
            pet_policy_acknowledged=model.pet_policy_acknowledged,
            vehicle_disclosure_acknowledged=model.vehicle_disclosure_acknowledged,
            damage_disclosure_acknowledged=model.damage_disclosure_acknowledged,
            state_code=model.state_code,
            state_disclosure_acknowledged=model.state_disclosure_acknowledged,
            attestation_text=model.attestation_text,
            signed_at=as_utc(model.signed_at),
            is_locked=model.is_locked,
        )
