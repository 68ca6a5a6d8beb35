"""Disclosure registry interface for dependency inversion."""

from abc import ABC, abstractmethod
from typing import Optional

from domain.value_objects import StateDisclosure


class IDisclosureRegistry(ABC):
    """Source of state-specific legal disclosure requirements."""

    @abstractmethod
    def get_required_disclosures(self, state_code: Optional[str]) -> list[StateDisclosure]:
        """
        List disclosures an applicant must acknowledge before submitting.

        Args:
            state_code: Two letter state code of the property

        Returns:
            Required disclosures, empty for states without extra rules
        """
        pass

    @abstractmethod
    def get_esignature_disclosure(self, state_code: Optional[str]) -> str:
        """Electronic signature disclosure text shown before signing a lease."""
        pass
