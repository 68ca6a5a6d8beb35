"""Audit sinks: database-backed and logging-backed."""

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from application.interfaces import AuditEvent, IAuditLogger
from infrastructure.config import get_logger
from infrastructure.database.models import AuditLogModel


class SQLAlchemyAuditLogger(IAuditLogger):
    """
    Appends audit events to the audit_logs table.

    Uses its own session per event so background writes never share the
    request session.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory
        self.logger = get_logger(self.__class__.__name__)

    async def record(self, event: AuditEvent) -> None:
        metadata = dict(event.metadata)
        async with self.session_factory() as session:
            session.add(
                AuditLogModel(
                    actor_id=event.actor_id,
                    action=event.action,
                    resource_type=event.resource_type,
                    resource_id=event.resource_id,
                    previous_data=event.previous_data,
                    new_data=event.new_data,
                    meta=metadata,
                    ip_address=metadata.get("ip_address"),
                    user_agent=metadata.get("user_agent"),
                    created_at=event.created_at,
                )
            )
            await session.commit()
        self.logger.debug(f"Audit {event.action} on {event.resource_type} {event.resource_id}")


class LoggingAuditLogger(IAuditLogger):
    """Writes audit events to the application log only."""

    def __init__(self):
        self.logger = get_logger("audit")

    async def record(self, event: AuditEvent) -> None:
        self.logger.info(
            f"AUDIT {event.action} {event.resource_type}={event.resource_id} actor={event.actor_id}",
            extra={"action": event.action, "actor_id": event.actor_id, "application_id": event.resource_id},
        )
