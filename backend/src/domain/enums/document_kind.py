"""Generated legal documents attached to an application."""

from enum import Enum


class DocumentKind(str, Enum):
    """Each kind maps to the application field holding its URL."""

    DISCLOSURE = "disclosure_pdf_url"
    LEASE = "lease_pdf_url"
    SIGNED_LEASE = "signed_lease_pdf_url"

    @property
    def slug(self) -> str:
        return {
            DocumentKind.DISCLOSURE: "application-disclosures",
            DocumentKind.LEASE: "lease-agreement",
            DocumentKind.SIGNED_LEASE: "lease-agreement-signed",
        }[self]

    def __str__(self) -> str:
        return self.value
