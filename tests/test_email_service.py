"""Tests for the queue-ready email service."""

from __future__ import annotations

from datetime import date
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

from netgrowth.services.email_service import (
    _build_html_email,
    _build_text_email,
    send_queue_ready_email,
)

QUEUE_DATE = date(2026, 3, 4)


def _make_item(
    first_name: str = "Ana",
    last_name: str = "Lopez",
    company: str = "Acme Corp",
    action_type: str = "connection_request",
    linkedin_url: str = "https://www.linkedin.com/in/ana",
) -> SimpleNamespace:
    """Create a mock queue item with a nested contact."""
    contact = SimpleNamespace(
        first_name=first_name,
        last_name=last_name,
        company=company,
        linkedin_url=linkedin_url,
    )
    return SimpleNamespace(contact=contact, action_type=action_type)


def _make_settings(**overrides) -> SimpleNamespace:
    """Create mock settings with SMTP defaults."""
    from tests.test_constants import TEST_SMTP_PASSWORD

    defaults = dict(
        smtp_host="smtp.example.com",
        smtp_port=587,
        smtp_user="user@example.com",
        smtp_password=TEST_SMTP_PASSWORD,
        smtp_from="noreply@example.com",
    )
    defaults.update(overrides)
    return SimpleNamespace(**defaults)


def _mock_server(mock_smtp_cls: MagicMock) -> MagicMock:
    server = MagicMock()
    mock_smtp_cls.return_value.__enter__ = MagicMock(return_value=server)
    mock_smtp_cls.return_value.__exit__ = MagicMock(return_value=False)
    return server


# ── HTML builder ──────────────────────────────────────────────


def test_build_html_email_lists_contacts_and_actions() -> None:
    items = [_make_item("Ana"), _make_item("Ben", action_type="follow_up")]
    html = _build_html_email(items, QUEUE_DATE)
    assert "Ana Lopez" in html
    assert "Ben Lopez" in html
    assert "Connection Request" in html
    assert "Follow-Up" in html
    assert "2026-03-04" in html
    assert "Total: 2 items" in html


def test_build_html_email_links_profile() -> None:
    html = _build_html_email([_make_item()], QUEUE_DATE)
    assert 'href="https://www.linkedin.com/in/ana"' in html


def test_build_html_email_escapes_names() -> None:
    html = _build_html_email([_make_item(first_name="<b>Eve</b>")], QUEUE_DATE)
    assert "<b>Eve</b>" not in html
    assert "&lt;b&gt;Eve&lt;/b&gt;" in html


def test_build_html_email_flagged_note() -> None:
    html = _build_html_email([_make_item()], QUEUE_DATE, flagged=2)
    assert "2 message(s) exceed 300 characters" in html


def test_build_html_email_empty_list() -> None:
    html = _build_html_email([], QUEUE_DATE)
    assert "<html>" in html
    assert "Total: 0 items" in html


# ── Text builder ─────────────────────────────────────────────


def test_build_text_email_readable() -> None:
    text = _build_text_email([_make_item(company="GammaCo")], QUEUE_DATE)
    assert "Daily Queue Ready - 2026-03-04" in text
    assert "Ana Lopez" in text
    assert "GammaCo" in text
    assert "(Connection Request)" in text


def test_build_text_email_unknown_contact() -> None:
    item = SimpleNamespace(contact=None, action_type="re_engagement")
    text = _build_text_email([item], QUEUE_DATE)
    assert "Unknown" in text
    assert "Re-Engagement" in text


def test_build_text_email_omits_flag_line_when_zero() -> None:
    text = _build_text_email([_make_item()], QUEUE_DATE)
    assert "exceed 300 characters" not in text


# ── send_queue_ready_email ───────────────────────────────────


@patch("netgrowth.services.email_service.smtplib.SMTP")
def test_send_email_success(mock_smtp_cls: MagicMock) -> None:
    from tests.test_constants import TEST_SMTP_PASSWORD

    server = _mock_server(mock_smtp_cls)
    result = send_queue_ready_email(
        [_make_item()], QUEUE_DATE, "dest@example.com", settings=_make_settings()
    )

    assert result is True
    mock_smtp_cls.assert_called_once_with("smtp.example.com", 587)
    server.starttls.assert_called_once()
    server.login.assert_called_once_with("user@example.com", TEST_SMTP_PASSWORD)
    server.sendmail.assert_called_once()
    sent_msg = server.sendmail.call_args[0][2]
    assert "Daily Queue Ready - 2026-03-04 (1 items)" in sent_msg


@patch("netgrowth.services.email_service.smtplib.SMTP")
def test_send_email_without_smtp_user_skips_login(mock_smtp_cls: MagicMock) -> None:
    server = _mock_server(mock_smtp_cls)
    result = send_queue_ready_email(
        [_make_item()], QUEUE_DATE, "dest@example.com", settings=_make_settings(smtp_user="")
    )
    assert result is True
    server.login.assert_not_called()


@patch("netgrowth.services.email_service.smtplib.SMTP")
def test_send_email_connection_error(mock_smtp_cls: MagicMock) -> None:
    mock_smtp_cls.side_effect = OSError("Connection refused")
    result = send_queue_ready_email(
        [_make_item()], QUEUE_DATE, "dest@example.com", settings=_make_settings()
    )
    assert result is False


def test_send_email_empty_recipient() -> None:
    result = send_queue_ready_email([_make_item()], QUEUE_DATE, "", settings=_make_settings())
    assert result is False


def test_send_email_smtp_not_configured() -> None:
    result = send_queue_ready_email(
        [_make_item()], QUEUE_DATE, "dest@example.com", settings=_make_settings(smtp_host="")
    )
    assert result is False


@patch("netgrowth.services.email_service.smtplib.SMTP")
def test_send_email_auth_failure(mock_smtp_cls: MagicMock) -> None:
    import smtplib as _smtplib

    server = _mock_server(mock_smtp_cls)
    server.login.side_effect = _smtplib.SMTPAuthenticationError(535, b"Bad credentials")

    result = send_queue_ready_email(
        [_make_item()], QUEUE_DATE, "dest@example.com", settings=_make_settings()
    )
    assert result is False
