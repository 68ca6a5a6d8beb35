"""State disclosure registry."""

from .state_disclosure_registry import (
    STANDARD_ESIGNATURE_DISCLOSURE,
    StaticDisclosureRegistry,
    normalize_state,
)

__all__ = ["STANDARD_ESIGNATURE_DISCLOSURE", "StaticDisclosureRegistry", "normalize_state"]
