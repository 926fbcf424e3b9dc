"""
Email service for verification and password reset messages.
Sends over SMTP when a host is configured, otherwise logs the message.
"""

from email.message import EmailMessage
from fastapi.concurrency import run_in_threadpool
from app.config import Settings, settings as default_settings
from app.utils.exceptions import EmailDeliveryError
from typing import Optional
import smtplib
import logging

logger = logging.getLogger(__name__)


class EmailService:
    """
    Renders account emails and hands them to the configured SMTP server.
    Blocking SMTP calls run in the threadpool so the event loop stays free.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or default_settings

    async def send_verification_email(self, email: str, token: str) -> None:
        """
        Send the email verification link.

        Args:
            email: Recipient address
            token: Verification token

        Raises:
            EmailDeliveryError: If the message cannot be delivered
        """
        link = f"{self.settings.frontend_url}/verify-email?token={token}"
        body = (
            "Welcome to Real Estate Bidding!\n\n"
            f"Please verify your email address by opening the link below:\n{link}\n\n"
            f"This link expires in {self.settings.verification_token_expire_hours} hours."
        )
        await self.send_email(email, "Verify your email address", body)

    async def send_password_reset_email(self, email: str, token: str) -> None:
        """
        Send the password reset link.

        Args:
            email: Recipient address
            token: Reset token

        Raises:
            EmailDeliveryError: If the message cannot be delivered
        """
        link = f"{self.settings.frontend_url}/reset-password?token={token}"
        body = (
            "A password reset was requested for your account.\n\n"
            f"Reset your password using the link below:\n{link}\n\n"
            f"This link expires in {self.settings.reset_token_expire_minutes} minutes. "
            "If you did not request a reset, you can ignore this email."
        )
        await self.send_email(email, "Reset your password", body)

    async def send_email(self, to: str, subject: str, body: str) -> None:
        """
        Deliver a plain-text message.

        Args:
            to: Recipient address
            subject: Message subject
            body: Plain-text body

        Raises:
            EmailDeliveryError: If the SMTP exchange fails
        """
        message = EmailMessage()
        message["From"] = self.settings.email_from
        message["To"] = to
        message["Subject"] = subject
        message.set_content(body)

        if not self.settings.email_enabled:
            logger.info(f"SMTP not configured; email to {to} not sent: {subject}")
            logger.debug(body)
            return

        try:
            await run_in_threadpool(self._deliver, message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email to {to}: {e}")
            raise EmailDeliveryError(str(e)) from e

        logger.info(f"Email sent to {to}: {subject}")

    def _deliver(self, message: EmailMessage) -> None:
        with smtplib.SMTP(self.settings.smtp_host, self.settings.smtp_port, timeout=30) as smtp:
            if self.settings.smtp_use_tls:
                smtp.starttls()
            if self.settings.smtp_user:
                smtp.login(self.settings.smtp_user, self.settings.smtp_password or "")
            smtp.send_message(message)
