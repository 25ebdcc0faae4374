"""Notification service for alert emails and SMS.

Email goes out over SMTP in a worker thread so the event loop is never
blocked. SMS is a logging stub until a provider is wired in.

Delivery never raises. Each attempt returns a NotificationDelivery, and the
caller decides whether a failure should surface to the client:

    service = NotificationService(settings)
    delivery = await service.send_email("owner@example.com", "Subject", "Body")
    if not delivery.success:
        ...
"""

from __future__ import annotations

import asyncio
import smtplib
import ssl
from dataclasses import dataclass
from datetime import UTC, datetime
from email.mime.text import MIMEText
from enum import Enum
from typing import TYPE_CHECKING, Any

from signalwatch.core.logging import get_logger, sanitize_error

if TYPE_CHECKING:
    from signalwatch.core.config import Settings

logger = get_logger(__name__)


class NotificationChannel(str, Enum):
    """Notification channel types."""

    EMAIL = "email"
    SMS = "sms"


@dataclass
class NotificationDelivery:
    """Result of a notification delivery attempt."""

    channel: NotificationChannel
    success: bool
    error: str | None = None
    delivered_at: datetime | None = None
    recipient: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "channel": self.channel.value,
            "success": self.success,
            "error": self.error,
            "delivered_at": self.delivered_at.isoformat() if self.delivered_at else None,
            "recipient": self.recipient,
        }


class NotificationService:
    """Delivers alert notifications by email and SMS.

    Email is only attempted when notifications are enabled and an SMTP host
    and sender address are configured.
    """

    def __init__(self, settings: Settings):
        self.settings = settings

    def is_email_configured(self) -> bool:
        return bool(self.settings.smtp_host and self.settings.smtp_from_address)

    async def send_email(self, to: str, subject: str, body: str) -> NotificationDelivery:
        """Send a plain-text email to a single recipient.

        Args:
            to: Recipient email address
            subject: Message subject
            body: Plain-text message body

        Returns:
            NotificationDelivery with success/failure status
        """
        if not self.settings.notification_enabled:
            return NotificationDelivery(
                channel=NotificationChannel.EMAIL,
                success=False,
                error="Notifications are disabled",
                recipient=to,
            )

        if not self.is_email_configured():
            return NotificationDelivery(
                channel=NotificationChannel.EMAIL,
                success=False,
                error="Email is not configured (missing SMTP settings)",
                recipient=to,
            )

        if not to:
            return NotificationDelivery(
                channel=NotificationChannel.EMAIL,
                success=False,
                error="No email recipient provided",
            )

        msg = MIMEText(body, "plain", "utf-8")
        msg["Subject"] = subject
        msg["From"] = self.settings.smtp_from_address or ""
        msg["To"] = to

        try:
            await asyncio.get_running_loop().run_in_executor(
                None, self._send_email_sync, msg, [to]
            )
        except smtplib.SMTPAuthenticationError as e:
            error_msg = f"SMTP authentication failed: {sanitize_error(e)}"
            logger.error(error_msg)
            return NotificationDelivery(
                channel=NotificationChannel.EMAIL, success=False, error=error_msg, recipient=to
            )
        except (smtplib.SMTPException, OSError) as e:
            error_msg = f"SMTP error: {sanitize_error(e)}"
            logger.error(error_msg)
            return NotificationDelivery(
                channel=NotificationChannel.EMAIL, success=False, error=error_msg, recipient=to
            )

        logger.info(f"Email sent: subject={subject!r}")
        return NotificationDelivery(
            channel=NotificationChannel.EMAIL,
            success=True,
            delivered_at=datetime.now(UTC),
            recipient=to,
        )

    def _send_email_sync(self, msg: MIMEText, recipients: list[str]) -> None:
        """Synchronous email sending (runs in thread pool)."""
        with smtplib.SMTP(self.settings.smtp_host or "", self.settings.smtp_port) as server:
            if self.settings.smtp_use_tls:
                server.starttls(context=ssl.create_default_context())
            if self.settings.smtp_user and self.settings.smtp_password:
                server.login(self.settings.smtp_user, self.settings.smtp_password)
            server.sendmail(
                self.settings.smtp_from_address or "",
                recipients,
                msg.as_string(),
            )

    async def send_sms(self, phone: str, message: str) -> NotificationDelivery:
        """Send an SMS (stubbed).

        No provider is integrated; the request is logged and reported as delivered.
        """
        logger.info(f"SMS requested for contact ({len(message)} chars), no provider configured")
        return NotificationDelivery(
            channel=NotificationChannel.SMS,
            success=True,
            delivered_at=datetime.now(UTC),
            recipient=phone,
        )


class _NotificationServiceSingleton:
    """Singleton holder for NotificationService instance."""

    _instance: NotificationService | None = None

    @classmethod
    def get(cls, settings: Settings) -> NotificationService:
        if cls._instance is None:
            cls._instance = NotificationService(settings)
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        cls._instance = None


def get_notification_service(settings: Settings) -> NotificationService:
    """Get or create the process-wide NotificationService."""
    return _NotificationServiceSingleton.get(settings)


def reset_notification_service() -> None:
    """Reset the notification service singleton (for testing)."""
    _NotificationServiceSingleton.reset()
