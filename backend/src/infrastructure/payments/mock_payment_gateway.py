"""In-process payment gateway that issues intent ids."""

import secrets

from application.interfaces import IPaymentGateway
from infrastructure.config import get_logger


class MockPaymentGateway(IPaymentGateway):
    """Creates ``pi_<random>`` intents without moving any money."""

    def __init__(self):
        self.logger = get_logger(self.__class__.__name__)

    async def create_intent(self, amount: str, purpose: str, reference: str) -> str:
        intent_id = f"pi_{secrets.token_hex(12)}"
        self.logger.info(f"Created payment intent {intent_id} for {amount} ({purpose})")
        return intent_id
