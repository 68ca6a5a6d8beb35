"""Email-backed notifications about application progress."""

import asyncio
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from application.interfaces import INotificationDispatcher
from domain.entities import Application, Property, UserAccount
from domain.enums import ApplicationStatus
from infrastructure.config import get_logger
from infrastructure.database.repositories import SQLAlchemyPropertyRepository
from infrastructure.reporting import EmailClient

STATUS_SUBJECTS = {
    ApplicationStatus.SUBMITTED.value: "Application Submitted Successfully",
    ApplicationStatus.UNDER_REVIEW.value: "Application Under Review",
    ApplicationStatus.PAYMENT_REQUESTED.value: "Payment Required for Your Application",
    ApplicationStatus.PAYMENT_COMPLETED.value: "Payment Received",
    ApplicationStatus.APPROVED.value: "Congratulations! Application Approved",
    ApplicationStatus.REJECTED.value: "Application Status Update",
    ApplicationStatus.WITHDRAWN.value: "Application Withdrawn",
}

SIGNATURE = "\n\nBest regards,\nRental Applications Team"


class EmailNotificationDispatcher(INotificationDispatcher):
    """
    Sends notification emails over SMTP.

    Account lookups use their own short-lived session because notifications
    run after the request that triggered them. Every method returns False
    instead of raising.
    """

    def __init__(
        self,
        email_client: EmailClient,
        session_factory: async_sessionmaker[AsyncSession]
    ):
        self.email = email_client
        self.session_factory = session_factory
        self.logger = get_logger(self.__class__.__name__)

    async def notify_owner_of_new_application(
        self,
        application: Application,
        property: Optional[Property]
    ) -> bool:
        if property is None:
            return False
        owner = await self._user(property.owner_id)
        if owner is None:
            return False

        applicant = self._applicant_name(application)
        body = (
            f"Hi {owner.display_name},\n\n"
            f"{applicant} started an application for {property.title}.\n"
            f"Application ID: {application.id}"
            f"{SIGNATURE}"
        )
        return await self._send(owner.email, f"New Application for {property.title}", body)

    async def send_applicant_confirmation(
        self,
        application: Application,
        property: Optional[Property]
    ) -> bool:
        email = await self._applicant_email(application)
        title = property.title if property else "the property"
        body = (
            f"Hi {self._applicant_name(application)},\n\n"
            f"We received your application for {title}. "
            "You can keep editing it until you submit."
            f"{SIGNATURE}"
        )
        return await self._send(email, f"Application Started: {title}", body)

    async def send_status_change_notification(
        self,
        application: Application,
        property: Optional[Property],
        previous_status: str,
        new_status: str
    ) -> bool:
        email = await self._applicant_email(application)
        title = property.title if property else "your rental"
        lines = [
            f"Hi {self._applicant_name(application)},",
            "",
            f"Your application for {title} moved from {previous_status} to {new_status}.",
        ]

        if new_status == ApplicationStatus.REJECTED.value:
            reason = application.rejection_reason or (
                application.rejection_details.explanation if application.rejection_details else None
            )
            if reason:
                lines.append(f"Reason: {reason}")
            if application.rejection_details and application.rejection_details.appealable:
                lines.append("You may appeal this decision by replying to this email.")
        elif new_status == ApplicationStatus.PAYMENT_REQUESTED.value and application.payment_request:
            payment = application.payment_request
            lines.append(f"Amount due: ${payment.amount} ({payment.purpose})")
            if payment.message:
                lines.append(payment.message)

        subject = STATUS_SUBJECTS.get(new_status, "Application Status Update")
        return await self._send(email, subject, "\n".join(lines) + SIGNATURE)

    async def notify_owner_of_scoring_complete(
        self,
        application: Application,
        property: Optional[Property]
    ) -> bool:
        if property is None:
            return False
        owner = await self._user(property.owner_id)
        if owner is None:
            return False

        applicant = self._applicant_name(application)
        lines = [
            f"Hi {owner.display_name},",
            "",
            f"The application from {applicant} for {property.title} was scored {application.score}/100.",
        ]
        if application.score_breakdown and application.score_breakdown.flags:
            lines.append(f"Flags: {', '.join(application.score_breakdown.flags)}")

        return await self._send(owner.email, f"Application Scored: {applicant}", "\n".join(lines) + SIGNATURE)

    async def send_lease_signature_complete_notification(
        self,
        application: Application,
        property: Optional[Property]
    ) -> bool:
        email = await self._applicant_email(application)
        title = property.title if property else "your rental"
        body = (
            f"Hi {self._applicant_name(application)},\n\n"
            f"Congratulations! Your lease for {title} has been fully signed.\n"
            "You can now access your digital lease in the dashboard."
            f"{SIGNATURE}"
        )
        sent = await self._send(email, f"Lease Signed Successfully: {title}", body)

        if property is not None:
            owner = await self._user(property.owner_id)
            if owner is not None:
                await self._send(
                    owner.email,
                    f"Lease Signed Successfully: {title}",
                    f"Hi {owner.display_name},\n\nThe lease for {title} is fully executed.{SIGNATURE}",
                )
        return sent

    async def _send(self, recipient: Optional[str], subject: str, body: str) -> bool:
        if not recipient:
            self.logger.warning(f"No recipient for '{subject}'")
            return False
        try:
            return await asyncio.to_thread(self.email.send, [recipient], subject, body)
        except Exception as e:
            self.logger.error(f"Notification '{subject}' failed: {e}", exc_info=True)
            return False

    async def _user(self, user_id: UUID) -> Optional[UserAccount]:
        try:
            async with self.session_factory() as session:
                return await SQLAlchemyPropertyRepository(session).get_user(user_id)
        except Exception as e:
            self.logger.error(f"User lookup failed for {user_id}: {e}", exc_info=True)
            return None

    async def _applicant_email(self, application: Application) -> Optional[str]:
        if application.personal_info and application.personal_info.email:
            return application.personal_info.email
        user = await self._user(application.user_id)
        return user.email if user else None

    @staticmethod
    def _applicant_name(application: Application) -> str:
        if application.personal_info and application.personal_info.full_name:
            return application.personal_info.full_name
        return "Applicant"
