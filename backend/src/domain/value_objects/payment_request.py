"""Fee payment requested by the landlord during review."""

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional
from uuid import UUID

from domain.enums import PaymentRequestStatus, PaymentStatus
from ._serialization import dump_datetime, load_datetime


@dataclass(frozen=True)
class PaymentRequest:
    """
    Payment sub-record embedded in an application.

    Each protocol step returns a new instance; the payment intent id is
    assigned exactly once.

    Attributes:
        amount: Requested amount as a decimal string
        purpose: What the payment is for
        message: Optional note from the landlord
        requested_at: When the request was created
        requested_by: Landlord-side actor who created it
        status: Request status ("pending" until completed)
        payment_intent_id: Gateway intent id, set on initiation
        payment_status: Intent sub-status (PENDING, COMPLETED)
    """

    amount: str
    purpose: str
    message: Optional[str] = None
    requested_at: Optional[datetime] = None
    requested_by: Optional[UUID] = None
    status: PaymentRequestStatus = PaymentRequestStatus.PENDING
    payment_intent_id: Optional[str] = None
    payment_status: Optional[PaymentStatus] = None
    initiated_by: Optional[UUID] = None
    initiated_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    verified_by: Optional[UUID] = None
    verified_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        if not str(self.amount or "").strip():
            raise ValueError("Payment amount is required")
        if not str(self.purpose or "").strip():
            raise ValueError("Payment purpose is required")

    @property
    def is_initiated(self) -> bool:
        return self.payment_intent_id is not None

    @property
    def is_completed(self) -> bool:
        return self.payment_status == PaymentStatus.COMPLETED

    def initiated(self, intent_id: str, by: UUID, at: datetime) -> "PaymentRequest":
        if self.payment_intent_id is not None:
            raise ValueError("Payment intent already assigned")
        return replace(
            self,
            payment_intent_id=intent_id,
            payment_status=PaymentStatus.PENDING,
            initiated_by=by,
            initiated_at=at,
        )

    def completed(self, at: datetime) -> "PaymentRequest":
        if self.payment_status != PaymentStatus.PENDING:
            raise ValueError("Only a pending payment can be completed")
        return replace(
            self,
            status=PaymentRequestStatus.COMPLETED,
            payment_status=PaymentStatus.COMPLETED,
            completed_at=at,
        )

    def verified(self, by: UUID, at: datetime) -> "PaymentRequest":
        return replace(self, verified_by=by, verified_at=at)

    def to_dict(self) -> dict:
        return {
            "amount": self.amount,
            "purpose": self.purpose,
            "message": self.message,
            "requested_at": dump_datetime(self.requested_at),
            "requested_by": str(self.requested_by) if self.requested_by else None,
            "status": self.status.value,
            "payment_intent_id": self.payment_intent_id,
            "payment_status": self.payment_status.value if self.payment_status else None,
            "initiated_by": str(self.initiated_by) if self.initiated_by else None,
            "initiated_at": dump_datetime(self.initiated_at),
            "completed_at": dump_datetime(self.completed_at),
            "verified_by": str(self.verified_by) if self.verified_by else None,
            "verified_at": dump_datetime(self.verified_at),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PaymentRequest":
        return cls(
            amount=data["amount"],
            purpose=data["purpose"],
            message=data.get("message"),
            requested_at=load_datetime(data.get("requested_at")),
            requested_by=_load_uuid(data.get("requested_by")),
            status=PaymentRequestStatus(data.get("status") or PaymentRequestStatus.PENDING.value),
            payment_intent_id=data.get("payment_intent_id"),
            payment_status=PaymentStatus(data["payment_status"]) if data.get("payment_status") else None,
            initiated_by=_load_uuid(data.get("initiated_by")),
            initiated_at=load_datetime(data.get("initiated_at")),
            completed_at=load_datetime(data.get("completed_at")),
            verified_by=_load_uuid(data.get("verified_by")),
            verified_at=load_datetime(data.get("verified_at")),
        )


def _load_uuid(value) -> Optional[UUID]:
    return UUID(str(value)) if value else None
