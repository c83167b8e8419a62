"""E-mail adapter."""

from csv_processor.boundary.email.sendgrid_client import EmailSender, SendGridEmailSender

__all__ = ["EmailSender", "SendGridEmailSender"]
