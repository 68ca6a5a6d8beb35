"""Payment gateway adapters."""

from application.interfaces import IPaymentGateway
from infrastructure.config import Settings

from .mock_payment_gateway import MockPaymentGateway


def create_payment_gateway(settings: Settings) -> IPaymentGateway:
    if settings.payment_gateway_provider.lower() == "mock":
        return MockPaymentGateway()
    raise ValueError(f"Unknown payment gateway provider: {settings.payment_gateway_provider}")


__all__ = ["MockPaymentGateway", "create_payment_gateway"]
