"""Deterministic multi-factor suitability score of an application."""

import re
from typing import Iterable, Optional

from application.interfaces import ICreditBureau
from domain.entities import Application
from domain.value_objects import (
    CoApplicant,
    DocumentStatus,
    Employment,
    PersonalInfo,
    RentalHistory,
    ScoreBreakdown,
)
from infrastructure.config import get_logger

REQUIRED_DOCUMENTS = ("id", "proof_of_income", "employment_verification")

EVICTION_PENALTY = 15

_YEARS = re.compile(r"(\d+(?:\.\d+)?)\s*(?:years?|yrs?)\b", re.IGNORECASE)
_MONTHS = re.compile(r"(\d+(?:\.\d+)?)\s*(?:months?|mos?)\b", re.IGNORECASE)
_NUMBER = re.compile(r"(\d+(?:\.\d+)?)")


def parse_duration_years(text: Optional[str]) -> int:
    """
    Parse a free-text duration into whole years.

    "3 years", "2 yrs 6 months", "18 months" and a bare "3" (read as years)
    are understood; anything else is zero. Partial years are dropped, so
    "11 months" is 0.
    """
    if not text:
        return 0
    years = _YEARS.search(text)
    months = _MONTHS.search(text)
    if years or months:
        total = float(years.group(1)) if years else 0.0
        if months:
            total += float(months.group(1)) / 12
        return int(total)
    number = _NUMBER.search(text)
    return int(float(number.group(1))) if number else 0


def score_income(
    employment: Optional[Employment],
    co_applicants: Iterable[CoApplicant] = ()
) -> tuple[int, list[str]]:
    income = (employment.monthly_income if employment else None) or 0.0
    income += sum(co.monthly_income or 0.0 for co in co_applicants)

    if income >= 5000:
        return 25, []
    if income >= 4000:
        return 22, []
    if income >= 3000:
        return 18, []
    if income >= 2000:
        return 12, []
    if income > 0:
        return 5, ["low_income"]
    return 0, ["no_income_provided"]


def score_credit(credit_score: Optional[int]) -> tuple[int, list[str]]:
    """Band a 300-850 bureau score; None means no identifier was supplied."""
    if credit_score is None:
        return 0, ["no_credit_check_authorization"]
    if credit_score >= 750:
        return 25, []
    if credit_score >= 700:
        return 20, []
    if credit_score >= 650:
        return 15, []
    if credit_score >= 600:
        return 10, []
    return 5, ["poor_credit_score"]


def score_rental_history(history: Optional[RentalHistory]) -> tuple[int, list[str]]:
    flags: list[str] = []
    years = parse_duration_years(history.duration if history else None)

    if years >= 3:
        score = 20
    elif years >= 2:
        score = 16
    elif years >= 1:
        score = 12
    else:
        score = 5
        flags.append("limited_rental_history")

    if history is not None and history.has_eviction:
        score = max(0, score - EVICTION_PENALTY)
        flags.append("previous_eviction")

    return score, flags


def score_employment(employment: Optional[Employment]) -> tuple[int, list[str]]:
    employment = employment or Employment()
    if not employment.is_employed:
        return 3, ["unemployed"]

    years = parse_duration_years(employment.duration)
    if years >= 2:
        return 15, []
    if years >= 1:
        return 12, []
    return 8, []


def score_documents(documents: dict[str, DocumentStatus]) -> tuple[int, list[str]]:
    uploaded = 0
    verified = 0
    for name in REQUIRED_DOCUMENTS:
        status = documents.get(name)
        if status is None:
            continue
        if status.verified:
            verified += 1
        if status.uploaded or status.verified:
            uploaded += 1

    if verified >= len(REQUIRED_DOCUMENTS):
        return 15, []
    if uploaded >= 3:
        return 12, []
    if uploaded == 2:
        return 8, []
    if uploaded == 1:
        return 5, []
    return 0, ["missing_documents"]


class ScoringEngine:
    """
    Computes the composite 0-100 score of an application.

    The same application always yields the same breakdown; a breakdown is
    computed from scratch on every call and never merged into a previous one.
    """

    def __init__(self, credit_bureau: ICreditBureau):
        self.credit_bureau = credit_bureau
        self.logger = get_logger(self.__class__.__name__)

    async def fetch_credit(self, personal_info: Optional[PersonalInfo]) -> Optional[int]:
        if personal_info is None or not personal_info.has_credit_identifier:
            return None
        return await self.credit_bureau.fetch_credit_score(personal_info.ssn)

    async def calculate(self, application: Application) -> ScoreBreakdown:
        """
        Score an application.

        Args:
            application: Application to score

        Returns:
            Fresh ScoreBreakdown
        """
        credit = await self.fetch_credit(application.personal_info)
        return self.calculate_with_credit(application, credit)

    def calculate_with_credit(
        self,
        application: Application,
        credit_score: Optional[int]
    ) -> ScoreBreakdown:
        """Score an application given an already fetched bureau score."""
        flags: list[str] = []

        income, income_flags = score_income(application.employment, application.co_applicants)
        credit, credit_flags = score_credit(credit_score)
        rental, rental_flags = score_rental_history(application.rental_history)
        employment, employment_flags = score_employment(application.employment)
        documents, document_flags = score_documents(application.documents)

        for category_flags in (income_flags, credit_flags, rental_flags, employment_flags, document_flags):
            flags.extend(category_flags)

        breakdown = ScoreBreakdown(
            income_score=income,
            credit_score=credit,
            rental_history_score=rental,
            employment_score=employment,
            documents_score=documents,
            flags=tuple(flags),
        )
        self.logger.info(
            f"Scored application {application.id}: {breakdown} flags={list(breakdown.flags)}"
        )
        return breakdown
