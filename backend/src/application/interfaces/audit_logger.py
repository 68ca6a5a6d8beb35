"""Audit sink interface for dependency inversion."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID


@dataclass(frozen=True)
class AuditEvent:
    """
    One append-only audit record.

    Attributes:
        actor_id: Who performed the action
        action: What was done ("application_create", "lease_sign", ...)
        resource_type: Kind of resource touched
        resource_id: Identifier of the resource
        previous_data: State before the action
        new_data: State after the action
        metadata: Request context (ip, user agent)
    """

    actor_id: Optional[UUID]
    action: str
    resource_type: str
    resource_id: Optional[UUID]
    previous_data: Optional[dict] = None
    new_data: Optional[dict] = None
    metadata: dict = field(default_factory=dict)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class IAuditLogger(ABC):
    """Append-only event sink."""

    @abstractmethod
    async def record(self, event: AuditEvent) -> None:
        """
        Append an audit event.

        Args:
            event: Event to record
        """
        pass
