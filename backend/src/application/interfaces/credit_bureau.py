"""Credit bureau interface for dependency inversion."""

from abc import ABC, abstractmethod


class ICreditBureau(ABC):
    """
    Abstract interface for credit score lookups.

    Implementations are selected at startup (deterministic mock or an
    HTTP bureau) so scoring never depends on a concrete provider.
    """

    @abstractmethod
    async def fetch_credit_score(self, identifier: str) -> int:
        """
        Fetch the credit score for an applicant identifier.

        Args:
            identifier: SSN-equivalent credit identifier (digits only)

        Returns:
            Credit score in the 300-850 range
        """
        pass
