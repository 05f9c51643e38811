"""
Tests for the password reset flow and the SMTP mailer.
"""
import smtplib
from urllib.parse import parse_qs, urlparse

import pytest

from jobquest.core import config
from jobquest.core.errors import MailDeliveryError
from jobquest.services import mail_service


@pytest.fixture
def outbox(monkeypatch):
    sent = []
    monkeypatch.setattr(
        "jobquest.services.identity_service.send_password_reset_email",
        lambda to_email, reset_link: sent.append((to_email, reset_link)),
    )
    return sent


def _token_from(link):
    return parse_qs(urlparse(link).query)["token"][0]


def test_reset_password_sends_link(client, seeker, outbox):
    response = client.post("/auth/reset-password", json={"email": "seeker@example.com"})

    assert response.status_code == 200
    assert response.json()["message"] == "Password reset email sent"
    assert len(outbox) == 1
    to_email, link = outbox[0]
    assert to_email == "seeker@example.com"
    assert link.startswith(f"{config.FRONTEND_URL}/reset-password?token=")


def test_reset_password_unknown_email(client, outbox):
    response = client.post("/auth/reset-password", json={"email": "ghost@example.com"})

    assert response.status_code == 404
    assert response.json()["detail"] == "No account found with this email"
    assert outbox == []


def test_reset_password_mail_failure(client, seeker, monkeypatch):
    def fail(to_email, reset_link):
        raise MailDeliveryError("Failed to send password reset email")

    monkeypatch.setattr("jobquest.services.identity_service.send_password_reset_email", fail)

    response = client.post("/auth/reset-password", json={"email": "seeker@example.com"})

    assert response.status_code == 502
    assert response.json()["detail"] == "Failed to send password reset email"


def test_confirm_reset_changes_password(client, seeker, outbox):
    client.post("/auth/reset-password", json={"email": "seeker@example.com"})
    token = _token_from(outbox[0][1])

    response = client.post("/auth/reset-password/confirm", json={"token": token, "new_password": "brandnew9"})
    assert response.status_code == 200
    assert response.json()["message"] == "Password updated"

    old = client.post("/auth/login", data={"username": "seeker@example.com", "password": "pw123456"})
    assert old.status_code == 401
    new = client.post("/auth/login", data={"username": "seeker@example.com", "password": "brandnew9"})
    assert new.status_code == 200


def test_confirm_reset_rejects_session_token(client, seeker, seeker_headers):
    """A session token cannot be replayed as a reset code."""
    session_token = seeker_headers["Authorization"].split(" ", 1)[1]

    response = client.post(
        "/auth/reset-password/confirm",
        json={"token": session_token, "new_password": "brandnew9"},
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "The password reset link is invalid or has expired"


def test_confirm_reset_rejects_garbage(client):
    response = client.post("/auth/reset-password/confirm", json={"token": "nope", "new_password": "brandnew9"})
    assert response.status_code == 400


# ---------------------------------------------------------------------------
# SMTP mailer
# ---------------------------------------------------------------------------

class FakeSMTP:
    instances = []

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port
        self.logged_in = None
        self.sent = []
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *args):
        return False

    def starttls(self):
        pass

    def login(self, user, password):
        self.logged_in = (user, password)

    def sendmail(self, from_addr, to_addrs, message):
        self.sent.append((from_addr, to_addrs, message))


def test_mailer_requires_smtp_host(monkeypatch):
    monkeypatch.setattr(config, "SMTP_HOST", None)

    with pytest.raises(MailDeliveryError) as exc_info:
        mail_service.send_password_reset_email("a@example.com", "http://x/reset")

    assert exc_info.value.message == "Password reset email is not configured"


def test_mailer_sends_link(monkeypatch):
    FakeSMTP.instances = []
    monkeypatch.setattr(config, "SMTP_HOST", "smtp.example.com")
    monkeypatch.setattr(config, "SMTP_USER", "mailer")
    monkeypatch.setattr(config, "SMTP_PASSWORD", "secret")
    monkeypatch.setattr(mail_service.smtplib, "SMTP", FakeSMTP)

    mail_service.send_password_reset_email("a@example.com", "http://x/reset?token=abc")

    server = FakeSMTP.instances[0]
    assert server.host == "smtp.example.com"
    assert server.logged_in == ("mailer", "secret")
    from_addr, to_addrs, message = server.sent[0]
    assert from_addr == config.MAIL_FROM
    assert to_addrs == ["a@example.com"]
    assert "Reset your JobQuest password" in message


def test_mailer_wraps_smtp_errors(monkeypatch):
    class BrokenSMTP(FakeSMTP):
        def sendmail(self, *args):
            raise smtplib.SMTPException("relay denied")

    monkeypatch.setattr(config, "SMTP_HOST", "smtp.example.com")
    monkeypatch.setattr(mail_service.smtplib, "SMTP", BrokenSMTP)

    with pytest.raises(MailDeliveryError) as exc_info:
        mail_service.send_password_reset_email("a@example.com", "http://x/reset")

    assert exc_info.value.message == "Failed to send password reset email"
