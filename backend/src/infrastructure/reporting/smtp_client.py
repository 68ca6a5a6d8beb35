"""SMTP client for sending emails via the standard library."""

import os
import smtplib
from pathlib import Path
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from email.mime.application import MIMEApplication
from typing import Optional

from infrastructure.config import Settings, get_logger

logger = get_logger("EmailClient")


class EmailClient:
    """Sends plain-text emails, optionally with a PDF attachment."""

    def __init__(self, settings: Settings):
        self.settings = settings

    @property
    def configured(self) -> bool:
        return self.settings.smtp_configured

    def send(
        self,
        recipients: list[str],
        subject: str,
        body: str,
        attachment_path: Optional[str] = None
    ) -> bool:
        """
        Send an email over SMTP.

        Args:
            recipients: Destination addresses
            subject: The subject of the email
            body: Plain-text content
            attachment_path: Optional path to a PDF to attach

        Returns:
            bool: True if sent successfully, False otherwise.
        """
        settings = self.settings

        if not self.configured:
            logger.warning("SMTP configuration missing. Skipping email.")
            return False

        recipients = [email.strip() for email in recipients if email and email.strip()]
        if not recipients:
            logger.warning(f"No recipient for '{subject}'. Skipping email.")
            return False

        try:
            msg = MIMEMultipart()
            msg["From"] = settings.smtp_email
            msg["To"] = ", ".join(recipients)
            msg["Subject"] = subject
            msg.attach(MIMEText(body, "plain", "utf-8"))

            if attachment_path and os.path.exists(attachment_path):
                with open(attachment_path, "rb") as f:
                    attach = MIMEApplication(f.read(), _subtype="pdf")
                attach.add_header("Content-Disposition", "attachment", filename=Path(attachment_path).name)
                msg.attach(attach)

            logger.info(f"Connecting to SMTP server: {settings.smtp_server}:{settings.smtp_port}...")
            with smtplib.SMTP(settings.smtp_server, settings.smtp_port, timeout=30) as server:
                server.ehlo()
                if settings.smtp_use_tls:
                    server.starttls()
                    server.ehlo()
                server.login(settings.smtp_email, settings.smtp_password)
                server.send_message(msg, to_addrs=recipients)

            logger.info(f"Email '{subject}' sent to {', '.join(recipients)}")
            return True

        except Exception as e:
            logger.error(f"Failed to send email '{subject}': {e}")
            return False
