"""SMTP delivery through EmailService."""

import smtplib

import pytest

from config.settings import Settings
from services.email_service import EmailDeliveryError, EmailService


class RecordingSMTP:
    """Stands in for smtplib.SMTP and records what the service does with it."""

    instances: list["RecordingSMTP"] = []

    def __init__(self, host, port, timeout=None, fail_starttls=False):
        self.host = host
        self.port = port
        self.calls: list[str] = []
        self.closed = False
        self.fail_starttls = fail_starttls
        RecordingSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.closed = True
        return False

    def starttls(self):
        self.calls.append("starttls")
        if self.fail_starttls:
            raise smtplib.SMTPNotSupportedError("STARTTLS extension not supported by server")

    def login(self, user, password):
        self.calls.append("login")

    def sendmail(self, sender, recipients, message):
        self.calls.append("sendmail")


@pytest.fixture
def smtp_settings():
    return Settings(
        _env_file=None,
        smtp_host="smtp.example.com",
        smtp_port=587,
        smtp_user="mailer",
        smtp_password="secret",
    )


@pytest.fixture(autouse=True)
def reset_instances():
    RecordingSMTP.instances = []


def test_disabled_without_host(settings):
    assert EmailService(settings).send_email("a@company.com", "Hi", "<p>Hi</p>") is False


def test_sends_over_starttls(monkeypatch, smtp_settings):
    monkeypatch.setattr(smtplib, "SMTP", RecordingSMTP)

    assert EmailService(smtp_settings).send_email("a@company.com", "Hi", "<p>Hi</p>") is True

    [server] = RecordingSMTP.instances
    assert server.calls == ["starttls", "login", "sendmail"]
    assert server.closed


def test_connection_closed_when_starttls_fails(monkeypatch, smtp_settings):
    monkeypatch.setattr(
        smtplib,
        "SMTP",
        lambda host, port, timeout=None: RecordingSMTP(host, port, timeout, fail_starttls=True),
    )

    with pytest.raises(EmailDeliveryError):
        EmailService(smtp_settings).send_email("a@company.com", "Hi", "<p>Hi</p>")

    [server] = RecordingSMTP.instances
    assert server.calls == ["starttls"]
    assert server.closed
