"""Lease signature repository interface - Abstract definition."""

from abc import ABC, abstractmethod
from uuid import UUID

from domain.entities import LeaseSignature


class ILeaseSignatureRepository(ABC):
    """
    Insert-only store of lease signatures.

    There is deliberately no update or delete operation.
    """

    @abstractmethod
    async def create(self, signature: LeaseSignature) -> LeaseSignature:
        """
        Insert a signature row.

        Args:
            signature: Signature to record

        Returns:
            Recorded LeaseSignature

        Raises:
            AlreadySigned: A signature for the same application and role exists
        """
        pass

    @abstractmethod
    async def list_by_application(self, application_id: UUID) -> list[LeaseSignature]:
        """
        List signatures of an application in signing order.

        Args:
            application_id: Application UUID

        Returns:
            Signatures ordered by signed_at
        """
        pass
