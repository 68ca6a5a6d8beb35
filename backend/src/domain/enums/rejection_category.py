"""Reasons a landlord can attach to a rejection."""

from enum import Enum


class RejectionCategory(str, Enum):
    """Categories recorded alongside a rejected application."""

    INCOME_INSUFFICIENT = "income_insufficient"
    CREDIT_ISSUES = "credit_issues"
    BACKGROUND_CHECK_FAILED = "background_check_failed"
    RENTAL_HISTORY_ISSUES = "rental_history_issues"
    INCOMPLETE_APPLICATION = "incomplete_application"
    MISSING_DOCUMENTS = "missing_documents"
    VERIFICATION_FAILED = "verification_failed"
    OTHER = "other"

    def __str__(self) -> str:
        return self.value
