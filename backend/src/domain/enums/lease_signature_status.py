"""Lease e-signature progress."""

from enum import Enum


class LeaseSignatureStatus(str, Enum):
    """Signature progress of the lease attached to an approved application."""

    UNSIGNED = "unsigned"
    PARTIALLY_SIGNED = "partially_signed"
    SIGNED = "signed"

    def __str__(self) -> str:
        return self.value
