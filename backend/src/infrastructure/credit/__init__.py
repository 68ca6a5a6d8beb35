"""Credit bureau adapters."""

from application.interfaces import ICreditBureau
from infrastructure.config import Settings

from .http_credit_bureau import CreditBureauError, HttpCreditBureau
from .mock_credit_bureau import MockCreditBureau


def create_credit_bureau(settings: Settings) -> ICreditBureau:
    """Pick the bureau named by ``credit_bureau_provider``."""
    provider = settings.credit_bureau_provider.lower()
    if provider == "http":
        return HttpCreditBureau(
            base_url=settings.credit_bureau_url or "",
            api_key=settings.credit_bureau_api_key,
            timeout=settings.credit_bureau_timeout_seconds,
        )
    if provider == "mock":
        return MockCreditBureau()
    raise ValueError(f"Unknown credit bureau provider: {settings.credit_bureau_provider}")


__all__ = ["CreditBureauError", "HttpCreditBureau", "MockCreditBureau", "create_credit_bureau"]
