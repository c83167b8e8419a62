"""
Notification configuration settings.

SendGrid settings for operator e-mail alerts sent when change events arrive.

Dependencies: pydantic_settings
System role: E-mail alert configuration
"""

from pydantic import Field

from csv_processor.configs.base import BaseSettings, env_config


class NotificationSettings(BaseSettings):
    """E-mail alert configuration."""

    model_config = env_config("NOTIFY_")

    sendgrid_api_key: str | None = Field(
        default=None,
        description="SendGrid API key; e-mail alerts are disabled when unset",
    )
    from_email: str | None = Field(
        default=None,
        description="Sender address for alerts",
    )
    operator_email: str | None = Field(
        default=None,
        description="Recipient of change alerts",
    )

    @property
    def email_enabled(self) -> bool:
        """True when API key, sender and recipient are all configured."""
        return bool(self.sendgrid_api_key and self.from_email and self.operator_email)
