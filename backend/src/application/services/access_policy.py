"""Capability resolution for an actor acting on one application."""

from typing import Optional
from uuid import UUID

from domain.entities import Application, Property
from domain.enums import Capability, SignerRole, UserRole
from domain.errors import RoleNotAuthorized
from domain.value_objects import Actor

APPLICANT_CAPABILITIES = frozenset({
    Capability.VIEW,
    Capability.EDIT_DRAFT,
    Capability.SUBMIT,
    Capability.WITHDRAW,
    Capability.PAY,
})

REVIEWER_CAPABILITIES = frozenset({
    Capability.VIEW,
    Capability.REVIEW,
    Capability.REQUEST_PAYMENT,
    Capability.VERIFY_PAYMENT,
})


class AccessPolicy:
    """
    Resolves the capability set of an actor once per request.

    The applicant owns the draft, submission, withdrawal and payment steps.
    The property owner, an administrator, or the manager assigned to the
    property owns review and payment requests.
    """

    def is_reviewer(self, actor: Actor, property: Optional[Property]) -> bool:
        if actor.role == UserRole.ADMIN:
            return True
        if property is None:
            return False
        if property.owner_id == actor.user_id:
            return True
        return (
            actor.role == UserRole.PROPERTY_MANAGER
            and property.manager_id is not None
            and property.manager_id == actor.user_id
        )

    def resolve(
        self,
        actor: Actor,
        application: Application,
        property: Optional[Property]
    ) -> frozenset[Capability]:
        """
        Compute what the actor may do with the application.

        Args:
            actor: Caller
            application: Application being acted on
            property: Property the application targets

        Returns:
            Capability set
        """
        capabilities: set[Capability] = set()
        signer_role = actor.role.signer_role

        if application.user_id == actor.user_id:
            capabilities |= APPLICANT_CAPABILITIES
            if signer_role == SignerRole.TENANT:
                capabilities.add(Capability.SIGN_AS_TENANT)

        if self.is_reviewer(actor, property):
            capabilities |= REVIEWER_CAPABILITIES
            is_owner = property is not None and property.owner_id == actor.user_id
            if signer_role == SignerRole.LANDLORD and (is_owner or actor.is_admin):
                capabilities.add(Capability.SIGN_AS_LANDLORD)

        if actor.is_admin:
            capabilities.add(Capability.VIEW_SENSITIVE)

        return frozenset(capabilities)

    def can_list_for_property(self, actor: Actor, property: Property) -> bool:
        return self.is_reviewer(actor, property)

    def can_list_for_user(self, actor: Actor, user_id: UUID) -> bool:
        return actor.user_id == user_id or actor.is_admin


def require(capabilities: frozenset[Capability], capability: Capability, message: str) -> None:
    """Raise RoleNotAuthorized unless the capability was granted."""
    if capability not in capabilities:
        raise RoleNotAuthorized(message)
