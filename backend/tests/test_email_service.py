"""Unit tests for access-code email delivery."""
from __future__ import annotations

import logging

import pytest
import resend

from app.services.email_service import EmailService, render_access_code_email


@pytest.fixture
def sdk_calls(monkeypatch):
    calls = []
    monkeypatch.setattr(resend, "api_key", resend.api_key)
    monkeypatch.setattr(resend.Emails, "send", lambda params: calls.append(params) or {"id": "msg-1"})
    return calls


def test_template_contains_escaped_code():
    html = render_access_code_email("A01-1<b>")

    assert "A01-1&lt;b&gt;" in html
    assert "A01-1<b>" not in html


def test_unconfigured_service_logs_the_code_instead(settings, sdk_calls, caplog):
    service = EmailService(settings)

    with caplog.at_level(logging.INFO, logger="app.services.email_service"):
        delivered = service.send_access_code("a@x.com", "A01-1")

    assert delivered is True
    assert service.is_configured is False
    assert sdk_calls == []
    assert "A01-1" in caplog.text
    assert "a@x.com" in caplog.text


def test_configured_service_calls_resend(settings, sdk_calls):
    service = EmailService(settings.model_copy(update={"RESEND_API_KEY": "re_test"}))

    delivered = service.send_access_code("a@x.com", "A07-7")

    assert delivered is True
    assert resend.api_key == "re_test"
    (params,) = sdk_calls
    assert params["to"] == ["a@x.com"]
    assert params["from"] == settings.RESEND_FROM_EMAIL
    assert params["subject"] == settings.EMAIL_SUBJECT
    assert "A07-7" in params["html"]


def test_sdk_failure_is_reported_not_raised(settings, monkeypatch):
    def boom(params):
        raise ConnectionError("network unreachable")

    monkeypatch.setattr(resend.Emails, "send", boom)
    service = EmailService(settings.model_copy(update={"RESEND_API_KEY": "re_test"}))

    assert service.send("a@x.com", "subject", "<p>hi</p>") is False
