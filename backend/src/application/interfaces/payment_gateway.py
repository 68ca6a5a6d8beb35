"""Payment gateway interface for dependency inversion."""

from abc import ABC, abstractmethod


class IPaymentGateway(ABC):
    """Abstract interface for creating payment intents."""

    @abstractmethod
    async def create_intent(self, amount: str, purpose: str, reference: str) -> str:
        """
        Create a payment intent.

        Args:
            amount: Amount as a decimal string
            purpose: Description of the payment
            reference: Application id the payment belongs to

        Returns:
            Gateway intent id
        """
        pass
