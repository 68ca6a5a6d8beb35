"""Application repository interface - Abstract definition."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from uuid import UUID

from domain.entities import Application
from domain.enums import DocumentKind, LeaseSignatureStatus


class IApplicationRepository(ABC):
    """
    Abstract repository interface for the Application aggregate.

    Writes are conditional: ``save`` only succeeds when the stored version
    still equals the version the caller read, so two writers racing from
    the same state cannot both win.
    """

    @abstractmethod
    async def create(self, application: Application) -> Application:
        """
        Persist a new application.

        Args:
            application: Application entity to create

        Returns:
            Created Application

        Raises:
            DuplicateApplication: The user already applied for the property
        """
        pass

    @abstractmethod
    async def get_by_id(self, application_id: UUID) -> Optional[Application]:
        """
        Retrieve an application by ID.

        Args:
            application_id: Application UUID

        Returns:
            Application if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_user_and_property(
        self,
        user_id: UUID,
        property_id: UUID
    ) -> Optional[Application]:
        """
        Retrieve the application a user made for a property.

        Args:
            user_id: Applicant UUID
            property_id: Property UUID

        Returns:
            Application if found, None otherwise
        """
        pass

    @abstractmethod
    async def list_by_user(self, user_id: UUID) -> list[Application]:
        """List an applicant's applications, newest first."""
        pass

    @abstractmethod
    async def list_by_property(self, property_id: UUID) -> list[Application]:
        """List applications received for a property, newest first."""
        pass

    @abstractmethod
    async def save(
        self,
        application: Application,
        expected_version: int
    ) -> Optional[Application]:
        """
        Write the application if nobody else changed it since it was read.

        Args:
            application: Application with updated data
            expected_version: Version the caller loaded

        Returns:
            The stored Application with its bumped version, or None when
            the stored version no longer matches
        """
        pass

    @abstractmethod
    async def update_lease_signature_status(
        self,
        application_id: UUID,
        status: LeaseSignatureStatus,
        fully_signed_at: Optional[datetime] = None
    ) -> Optional[Application]:
        """
        Record lease signing progress. The status never moves backwards.

        Args:
            application_id: Application UUID
            status: New signature status
            fully_signed_at: When the last party signed

        Returns:
            Updated Application, None if not found
        """
        pass

    @abstractmethod
    async def set_document_url_if_empty(
        self,
        application_id: UUID,
        document: DocumentKind,
        url: str
    ) -> bool:
        """
        Claim a generated document URL only if none is stored yet.

        Args:
            application_id: Application UUID
            document: Which document the URL belongs to
            url: Document URL

        Returns:
            True if this call set the URL, False if it was already set
        """
        pass

    @abstractmethod
    async def release_document_url(
        self,
        application_id: UUID,
        document: DocumentKind,
        url: str
    ) -> None:
        """Clear a claimed URL whose document could not be produced."""
        pass
