from __future__ import annotations

import smtplib

import pytest

from src.dayflow.dayflow.otp.mailer import OTP_SUBJECT, MailDeliveryError, SmtpMailer


class FakeSMTP:
    instances: list["FakeSMTP"] = []
    fail_with: Exception | None = None

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port
        self.calls = []
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self):
        self.calls.append("starttls")

    def login(self, username, password):
        if FakeSMTP.fail_with:
            raise FakeSMTP.fail_with
        self.calls.append(("login", username))

    def sendmail(self, sender, to, message):
        self.calls.append(("sendmail", sender, tuple(to)))


@pytest.fixture
def fake_smtp(monkeypatch):
    FakeSMTP.instances = []
    FakeSMTP.fail_with = None
    monkeypatch.setattr(smtplib, "SMTP", FakeSMTP)
    return FakeSMTP


def _mailer():
    return SmtpMailer("smtp.example.com", 587, "hr@dayflow.io", "app-password", None)


def test_from_config_without_credentials_returns_none():
    assert SmtpMailer.from_config({"host": "smtp.example.com", "username": "", "password": ""}) is None


def test_from_config_defaults_sender_to_username():
    mailer = SmtpMailer.from_config({"username": "hr@dayflow.io", "password": "x"})
    assert mailer.sender_email == "hr@dayflow.io"
    assert mailer.host == "smtp.gmail.com"
    assert mailer.port == 587


def test_message_carries_code_and_validity():
    msg = _mailer().build_message("ana@dayflow.io", "482913", ttl_minutes=5)
    assert msg["Subject"] == OTP_SUBJECT
    assert msg["To"] == "ana@dayflow.io"
    plain, html = msg.get_payload()
    assert "482913" in plain.get_payload()
    assert "5 minutes" in html.get_payload()


def test_send_uses_tls_and_login(fake_smtp):
    _mailer().send_otp("ana@dayflow.io", "482913", ttl_minutes=5)

    server = fake_smtp.instances[0]
    assert server.calls == [
        "starttls",
        ("login", "hr@dayflow.io"),
        ("sendmail", "hr@dayflow.io", ("ana@dayflow.io",)),
    ]


def test_authentication_failure_is_mapped(fake_smtp):
    fake_smtp.fail_with = smtplib.SMTPAuthenticationError(535, b"bad credentials")
    with pytest.raises(MailDeliveryError, match="Email authentication failed"):
        _mailer().send_otp("ana@dayflow.io", "482913", ttl_minutes=5)


def test_connection_failure_is_mapped(fake_smtp):
    fake_smtp.fail_with = ConnectionRefusedError("refused")
    with pytest.raises(MailDeliveryError, match="Could not connect to email server"):
        _mailer().send_otp("ana@dayflow.io", "482913", ttl_minutes=5)
