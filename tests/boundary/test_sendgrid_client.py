"""
Tests for the SendGrid alert sender.

System role: Verification of e-mail adapter
"""

from unittest.mock import MagicMock

import pytest

from csv_processor.boundary.email import SendGridEmailSender
from csv_processor.configs.notifications import NotificationSettings
from csv_processor.core.exceptions import InternalError


@pytest.fixture
def client() -> MagicMock:
    client = MagicMock()
    client.send.return_value = MagicMock(status_code=202)
    return client


@pytest.fixture
def client_factory(client: MagicMock) -> MagicMock:
    return MagicMock(return_value=client)


def make_sender(client_factory, **overrides) -> SendGridEmailSender:
    options = {
        "api_key": "SG.test-key",
        "from_email": "noreply@example.com",
        "client_factory": client_factory,
    }
    options.update(overrides)
    return SendGridEmailSender(**options)


def test_sends_plain_text_mail(client_factory, client) -> None:
    sender = make_sender(client_factory)

    assert sender.send("ops@example.com", "CSV change: Created", "body text") is True

    client_factory.assert_called_once_with(api_key="SG.test-key")
    mail = client.send.call_args.args[0].get()
    assert mail["from"]["email"] == "noreply@example.com"
    assert mail["subject"] == "CSV change: Created"
    assert mail["personalizations"][0]["to"][0]["email"] == "ops@example.com"
    assert mail["content"] == [{"type": "text/plain", "value": "body text"}]


def test_client_is_created_once(client_factory, client) -> None:
    sender = make_sender(client_factory)

    sender.send("ops@example.com", "a", "b")
    sender.send("ops@example.com", "c", "d")

    client_factory.assert_called_once()
    assert client.send.call_count == 2


@pytest.mark.parametrize("overrides", [{"api_key": None}, {"from_email": None}])
def test_disabled_sender_returns_false(client_factory, overrides) -> None:
    sender = make_sender(client_factory, **overrides)

    assert sender.enabled is False
    assert sender.send("ops@example.com", "s", "b") is False
    client_factory.assert_not_called()


def test_rejected_status_raises_internal_error(client_factory, client) -> None:
    client.send.return_value = MagicMock(status_code=401)
    sender = make_sender(client_factory)

    with pytest.raises(InternalError):
        sender.send("ops@example.com", "s", "b")


def test_send_failure_raises_internal_error(client_factory, client) -> None:
    error = ConnectionError("api unreachable")
    client.send.side_effect = error
    sender = make_sender(client_factory)

    with pytest.raises(InternalError) as exc_info:
        sender.send("ops@example.com", "s", "b")

    assert exc_info.value.__cause__ is error


def test_from_settings(monkeypatch) -> None:
    monkeypatch.setenv("NOTIFY_SENDGRID_API_KEY", "SG.env-key")
    monkeypatch.setenv("NOTIFY_FROM_EMAIL", "csv@local")
    monkeypatch.setenv("NOTIFY_OPERATOR_EMAIL", "ops@local")

    settings = NotificationSettings(_env_file=None)
    sender = SendGridEmailSender.from_settings(settings)

    assert settings.email_enabled is True
    assert sender.enabled is True
