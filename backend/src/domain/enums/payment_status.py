"""Statuses of the embedded payment request."""

from enum import Enum


class PaymentRequestStatus(str, Enum):
    """Status of the request itself, as seen by the landlord."""

    PENDING = "pending"
    COMPLETED = "COMPLETED"

    def __str__(self) -> str:
        return self.value


class PaymentStatus(str, Enum):
    """Sub-status of the payment intent once the applicant starts paying."""

    PENDING = "PENDING"
    COMPLETED = "COMPLETED"

    def __str__(self) -> str:
        return self.value
