"""Static registry of state-specific disclosures."""

from typing import Optional

from application.interfaces import IDisclosureRegistry
from domain.value_objects import StateDisclosure

APPLICATION_DISCLOSURES: dict[str, tuple[StateDisclosure, ...]] = {
    "CA": (
        StateDisclosure(
            id="rent_control",
            label="Rent Control Disclosure",
            text="I acknowledge that this property may be subject to California rent control laws.",
        ),
        StateDisclosure(
            id="megans_law",
            label="Megan's Law Disclosure",
            text=(
                "I understand that information about registered sex offenders is available "
                "at www.meganslaw.ca.gov."
            ),
        ),
    ),
    "NY": (
        StateDisclosure(
            id="fee_cap",
            label="Application Fee Cap Disclosure",
            text="I understand that New York law limits application fees to the legally allowed maximum.",
        ),
    ),
    "TX": (
        StateDisclosure(
            id="no_rent_control",
            label="No Rent Control Notice",
            text="I understand that Texas does not impose statewide rent control regulations.",
        ),
    ),
}

ESIGNATURE_DISCLOSURES: dict[str, str] = {
    "CA": (
        "California E-Signature Disclosure: You agree that your electronic signature is the legal "
        "equivalent of your manual signature on this Agreement. Under the California Uniform "
        "Electronic Transactions Act (UETA), this Agreement is legally binding."
    ),
    "NY": (
        "New York E-Signature Disclosure: This document is being signed electronically pursuant to "
        "the New York Electronic Signatures and Records Act (ESRA). Your electronic signature has the "
        "same validity and enforceability as a handwritten signature."
    ),
    "TX": (
        "Texas E-Signature Disclosure: You acknowledge that your electronic signature on this "
        "Agreement is legally binding under the Texas Uniform Electronic Transactions Act."
    ),
}

STANDARD_ESIGNATURE_DISCLOSURE = (
    "Standard E-Signature Disclosure: By signing this document, you agree that your electronic "
    "signature is legally binding and has the same effect as a handwritten signature."
)


def normalize_state(state_code: Optional[str]) -> Optional[str]:
    if not state_code:
        return None
    return state_code.strip().upper() or None


class StaticDisclosureRegistry(IDisclosureRegistry):
    """Disclosure texts compiled into the application."""

    def get_required_disclosures(self, state_code: Optional[str]) -> list[StateDisclosure]:
        state = normalize_state(state_code)
        if state is None:
            return []
        return list(APPLICATION_DISCLOSURES.get(state, ()))

    def get_esignature_disclosure(self, state_code: Optional[str]) -> str:
        state = normalize_state(state_code)
        return ESIGNATURE_DISCLOSURES.get(state, STANDARD_ESIGNATURE_DISCLOSURE)
