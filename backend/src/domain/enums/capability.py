"""Capabilities granted to an actor for a single application."""

from enum import Enum


class Capability(str, Enum):
    """What an actor may do with an application, resolved once per request."""

    VIEW = "view"
    EDIT_DRAFT = "edit_draft"
    SUBMIT = "submit"
    WITHDRAW = "withdraw"
    REVIEW = "review"
    REQUEST_PAYMENT = "request_payment"
    PAY = "pay"
    VERIFY_PAYMENT = "verify_payment"
    SIGN_AS_TENANT = "sign_as_tenant"
    SIGN_AS_LANDLORD = "sign_as_landlord"
    VIEW_SENSITIVE = "view_sensitive"

    def __str__(self) -> str:
        return self.value
