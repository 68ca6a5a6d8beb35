"""Lifecycle statuses of a rental application."""

from enum import Enum


class ApplicationStatus(str, Enum):
    """Statuses an application moves through from draft to a terminal decision."""

    DRAFT = "draft"
    SUBMITTED = "submitted"
    UNDER_REVIEW = "under_review"
    PAYMENT_REQUESTED = "payment_requested"
    PAYMENT_COMPLETED = "payment_completed"
    APPROVED = "approved"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"

    @property
    def is_terminal(self) -> bool:
        """Terminal statuses never re-open."""
        return self in (
            ApplicationStatus.APPROVED,
            ApplicationStatus.REJECTED,
            ApplicationStatus.WITHDRAWN,
        )

    def __str__(self) -> str:
        return self.value
