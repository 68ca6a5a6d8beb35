"""Review outcome records: rejection details and legal acceptance."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ._serialization import dump_datetime, load_datetime


@dataclass(frozen=True)
class RejectionDetails:
    """Structured explanation attached to a rejection."""

    categories: tuple[str, ...] = ()
    explanation: str = ""
    appealable: bool = False

    def to_dict(self) -> dict:
        return {
            "categories": list(self.categories),
            "explanation": self.explanation,
            "appealable": self.appealable,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "RejectionDetails":
        return cls(
            categories=tuple(data.get("categories") or ()),
            explanation=data.get("explanation") or "",
            appealable=bool(data.get("appealable", False)),
        )


@dataclass(frozen=True)
class LegalAcceptance:
    """Record of the legal documents (and versions) accepted at submission."""

    accepted: bool
    accepted_at: Optional[datetime] = None
    documents: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "accepted": self.accepted,
            "accepted_at": dump_datetime(self.accepted_at),
            "documents": dict(self.documents),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "LegalAcceptance":
        return cls(
            accepted=bool(data.get("accepted", False)),
            accepted_at=load_datetime(data.get("accepted_at")),
            documents=dict(data.get("documents") or {}),
        )
