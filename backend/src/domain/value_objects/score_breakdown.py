"""Composite suitability score of an application."""

from dataclasses import dataclass, field

MAX_SCORE = 100

CATEGORY_LIMITS = {
    "income_score": 25,
    "credit_score": 25,
    "rental_history_score": 20,
    "employment_score": 15,
    "documents_score": 15,
}


@dataclass(frozen=True)
class ScoreBreakdown:
    """
    Five independently computed category scores and their total.

    A breakdown is always replaced as a whole; it is never patched.

    Attributes:
        income_score: 0-25
        credit_score: 0-25
        rental_history_score: 0-20
        employment_score: 0-15
        documents_score: 0-15
        flags: Advisory flags raised while scoring, in category order
    """

    income_score: int = 0
    credit_score: int = 0
    rental_history_score: int = 0
    employment_score: int = 0
    documents_score: int = 0
    flags: tuple[str, ...] = ()
    max_score: int = MAX_SCORE
    total_score: int = field(init=False)

    def __post_init__(self) -> None:
        """Validate category limits and derive the total."""
        for name, limit in CATEGORY_LIMITS.items():
            value = getattr(self, name)
            if value < 0 or value > limit:
                raise ValueError(f"{name} must be between 0 and {limit}, got {value}")
        object.__setattr__(self, "flags", tuple(self.flags))
        object.__setattr__(
            self,
            "total_score",
            self.income_score
            + self.credit_score
            + self.rental_history_score
            + self.employment_score
            + self.documents_score,
        )

    def has_flag(self, flag: str) -> bool:
        return flag in self.flags

    def to_dict(self) -> dict:
        return {
            "income_score": self.income_score,
            "credit_score": self.credit_score,
            "rental_history_score": self.rental_history_score,
            "employment_score": self.employment_score,
            "documents_score": self.documents_score,
            "total_score": self.total_score,
            "max_score": self.max_score,
            "flags": list(self.flags),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ScoreBreakdown":
        return cls(
            income_score=data.get("income_score", 0),
            credit_score=data.get("credit_score", 0),
            rental_history_score=data.get("rental_history_score", 0),
            employment_score=data.get("employment_score", 0),
            documents_score=data.get("documents_score", 0),
            flags=tuple(data.get("flags") or ()),
            max_score=data.get("max_score", MAX_SCORE),
        )

    def __str__(self) -> str:
        return f"{self.total_score}/{self.max_score}"
