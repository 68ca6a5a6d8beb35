"""Notification dispatcher interface for dependency inversion."""

from abc import ABC, abstractmethod
from typing import Optional

from domain.entities import Application, Property


class INotificationDispatcher(ABC):
    """
    Outbound notifications about application progress.

    Every method returns True when the notification was handed off and
    False otherwise. Implementations must not raise.
    """

    @abstractmethod
    async def notify_owner_of_new_application(
        self,
        application: Application,
        property: Optional[Property]
    ) -> bool:
        pass

    @abstractmethod
    async def send_applicant_confirmation(
        self,
        application: Application,
        property: Optional[Property]
    ) -> bool:
        pass

    @abstractmethod
    async def send_status_change_notification(
        self,
        application: Application,
        property: Optional[Property],
        previous_status: str,
        new_status: str
    ) -> bool:
        """
        Tell the applicant their application changed status.

        Rejections include the reason and whether the decision can be appealed.
        """
        pass

    @abstractmethod
    async def notify_owner_of_scoring_complete(
        self,
        application: Application,
        property: Optional[Property]
    ) -> bool:
        pass

    @abstractmethod
    async def send_lease_signature_complete_notification(
        self,
        application: Application,
        property: Optional[Property]
    ) -> bool:
        pass
