"""Legal document generator interface for dependency inversion."""

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from domain.entities import Application, LeaseSignature, Property
from domain.enums import DocumentKind


class IDocumentGenerator(ABC):
    """
    Renders legal documents for application milestones.

    Callers claim the URL from ``document_url`` on the application first and
    render only when the claim succeeded, so each document is produced once.
    """

    @abstractmethod
    def document_url(self, application_id: UUID, document: DocumentKind) -> str:
        """URL a document of the application is served from."""
        pass

    @abstractmethod
    async def generate_disclosure_pdf(
        self,
        application: Application,
        property: Optional[Property],
        url: str
    ) -> str:
        """Render the acknowledged disclosure packet on submission."""
        pass

    @abstractmethod
    async def generate_lease_pdf(
        self,
        application: Application,
        property: Optional[Property],
        url: str
    ) -> str:
        """Render the unsigned lease agreement on approval."""
        pass

    @abstractmethod
    async def generate_signed_lease_pdf(
        self,
        application: Application,
        property: Optional[Property],
        signatures: list[LeaseSignature],
        esignature_disclosure: str,
        url: str
    ) -> str:
        """
        Render the fully executed lease.

        Args:
            application: Approved application
            property: Property being leased
            signatures: Tenant and landlord signatures
            esignature_disclosure: State e-signature disclosure text
            url: URL already claimed for the document

        Returns:
            The URL the document was written for
        """
        pass
