"""Tests for the verification email gateway."""

from __future__ import annotations

import logging

import httpx
import pytest

from app.config import get_settings
from app.services import notifications


@pytest.fixture()
def mailgun(monkeypatch):
    """Configure Mailgun and route its HTTP calls to a mock transport."""

    settings = get_settings()
    monkeypatch.setattr(settings, "mailgun_api_key", "key-test")
    monkeypatch.setattr(settings, "mailgun_domain", "mg.eats.demo")
    monkeypatch.setattr(settings, "mailgun_from_email", "noreply@mg.eats.demo")

    requests: list[httpx.Request] = []
    responses: list[int] = []
    real_client = httpx.Client

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        status = responses.pop(0) if responses else 200
        return httpx.Response(status, json={"id": "<msg@mg>"})

    monkeypatch.setattr(
        notifications.httpx,
        "Client",
        lambda **kwargs: real_client(transport=httpx.MockTransport(handler), **kwargs),
    )
    return requests, responses


def test_send_email_skipped_when_unconfigured(caplog):
    with caplog.at_level(logging.WARNING, logger="uvicorn.error"):
        sent = notifications.send_email("a@email.com", "subject", "<p>hi</p>")

    assert sent is False
    assert "NOT SENT" in caplog.text


def test_send_verification_email_posts_code_to_mailgun(mailgun):
    requests, _ = mailgun

    sent = notifications.send_verification_email("a@email.com", "abc123")

    assert sent is True
    assert len(requests) == 1
    request = requests[0]
    assert str(request.url) == "https://api.mailgun.net/v3/mg.eats.demo/messages"
    body = request.content.decode()
    assert "abc123" in body
    assert "a%40email.com" in body


def test_mailgun_retries_eu_endpoint_on_401(mailgun):
    requests, responses = mailgun
    responses.extend([401, 200])

    assert notifications.send_verification_email("a@email.com", "abc123") is True
    assert [r.url.host for r in requests] == ["api.mailgun.net", "api.eu.mailgun.net"]


def test_mailgun_failure_returns_false(mailgun):
    _, responses = mailgun
    responses.append(500)

    assert notifications.send_verification_email("a@email.com", "abc123") is False


def test_deliver_verification_email_swallows_errors(monkeypatch, caplog):
    def _boom(to_email: str, code: str) -> bool:
        raise RuntimeError("gateway down")

    monkeypatch.setattr(notifications, "send_verification_email", _boom)

    with caplog.at_level(logging.ERROR, logger="uvicorn.error"):
        notifications.deliver_verification_email("a@email.com", "abc123")

    assert "a@email.com" in caplog.text
