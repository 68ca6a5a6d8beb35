"""The authenticated caller of a workflow operation."""

from dataclasses import dataclass
from uuid import UUID

from domain.enums import UserRole


@dataclass(frozen=True)
class Actor:
    """
    Immutable identity of the user performing an operation.

    Attributes:
        user_id: Account id
        role: Account role
        ip_address: Client address, recorded on signatures and audit events
        user_agent: Client user agent
    """

    user_id: UUID
    role: UserRole
    ip_address: str | None = None
    user_agent: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def __str__(self) -> str:
        return f"{self.role.value}:{self.user_id}"
