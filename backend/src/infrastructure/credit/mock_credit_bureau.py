"""Deterministic credit bureau for development and tests."""

from application.interfaces import ICreditBureau

BASE_SCORE = 600
POINTS_PER_DIGIT = 20
DEFAULT_DIGIT = 5


class MockCreditBureau(ICreditBureau):
    """
    Derives a score from the last digit of the identifier.

    600 + 20 * digit, so scores land between 620 and 780. A missing,
    non-numeric or zero last digit counts as 5.
    """

    async def fetch_credit_score(self, identifier: str) -> int:
        last = (identifier or "").strip()[-1:]
        digit = int(last) if last.isdigit() else 0
        return BASE_SCORE + POINTS_PER_DIGIT * (digit or DEFAULT_DIGIT)
