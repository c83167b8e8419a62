"""
Outbound e-mail for operator alerts.

Dependencies: sendgrid
System role: E-mail adapter for the change alert subscriber
"""

import logging
from typing import Callable, Protocol

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Content, Email, Mail, To

from csv_processor.configs.notifications import NotificationSettings
from csv_processor.core.exceptions import InternalError

logger = logging.getLogger(__name__)

ACCEPTED_STATUS_CODES = (200, 201, 202)


class EmailSender(Protocol):
    """Anything that can deliver a plain-text e-mail."""

    def send(self, to_email: str, subject: str, body: str) -> bool: ...


class SendGridEmailSender:
    """
    Sends plain-text alerts through the SendGrid API.

    A sender built without an API key or sender address is disabled:
    send() logs and returns False instead of failing. The API client is
    created on first use.
    """

    def __init__(
        self,
        api_key: str | None,
        from_email: str | None = None,
        client_factory: Callable[..., SendGridAPIClient] = SendGridAPIClient,
    ) -> None:
        self._api_key = api_key
        self._from_email = from_email
        self._client_factory = client_factory
        self._client: SendGridAPIClient | None = None

    @classmethod
    def from_settings(cls, settings: NotificationSettings) -> "SendGridEmailSender":
        """Build a sender from notification settings."""
        return cls(api_key=settings.sendgrid_api_key, from_email=settings.from_email)

    @property
    def enabled(self) -> bool:
        return bool(self._api_key and self._from_email)

    def _get_client(self) -> SendGridAPIClient:
        if self._client is None:
            self._client = self._client_factory(api_key=self._api_key)
        return self._client

    def send(self, to_email: str, subject: str, body: str) -> bool:
        """
        Send a plain-text e-mail.

        Args:
            to_email: Recipient address
            subject: Subject line
            body: Plain text body

        Returns:
            bool: True when SendGrid accepted the message, False when e-mail is disabled

        Raises:
            InternalError: When SendGrid rejects the message or is unreachable
        """
        if not self.enabled:
            logger.warning("Email not sent (SendGrid disabled)", extra={"subject": subject})
            return False

        message = Mail(
            from_email=Email(self._from_email),
            to_emails=To(to_email),
            subject=subject,
        )
        message.add_content(Content("text/plain", body))

        try:
            response = self._get_client().send(message)
        except Exception as e:
            logger.error(
                "Email delivery failed",
                extra={"to_email": to_email, "error_type": type(e).__name__},
            )
            raise InternalError("Failed to send e-mail alert") from e

        if response.status_code not in ACCEPTED_STATUS_CODES:
            logger.error(
                "Email rejected",
                extra={"to_email": to_email, "status_code": response.status_code},
            )
            raise InternalError("Failed to send e-mail alert")

        logger.info(
            "Email sent",
            extra={"to_email": to_email, "subject": subject, "status_code": response.status_code},
        )
        return True
