"""Email delivery for the queue-ready notification."""

from __future__ import annotations

import html
import logging
import smtplib
from datetime import date
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from netgrowth.config import get_settings

logger = logging.getLogger(__name__)

ACTION_LABELS: dict[str, str] = {
    "connection_request": "Connection Request",
    "follow_up": "Follow-Up",
    "re_engagement": "Re-Engagement",
}


def _item_fields(item) -> tuple[str, str, str, str]:
    """(name, company, action label, linkedin url) for a QueueItem-like object."""
    contact = getattr(item, "contact", None)
    if contact is not None:
        first = getattr(contact, "first_name", "") or ""
        last = getattr(contact, "last_name", "") or ""
        name = f"{first} {last}".strip() or "Unknown"
        company = getattr(contact, "company", "") or ""
        url = getattr(contact, "linkedin_url", "") or ""
    else:
        name, company, url = "Unknown", "", ""
    action_type = getattr(item, "action_type", "") or ""
    return name, company, ACTION_LABELS.get(action_type, action_type), url


def _build_html_email(items: list, queue_date: date, flagged: int = 0) -> str:
    rows = ""
    for item in items:
        name, company, action, url = _item_fields(item)
        label = html.escape(name)
        if url:
            label = f'<a href="{html.escape(url)}">{label}</a>'
        company_part = f" &ndash; {html.escape(company)}" if company else ""
        rows += f'<li>{label}{company_part} <span style="color:#888">({action})</span></li>'

    flagged_section = ""
    if flagged:
        flagged_section = (
            f'<p style="color:#b45309">{flagged} message(s) exceed 300 characters '
            "and need manual editing.</p>"
        )

    return (
        "<html><body>"
        f"<h2>Daily Queue Ready &ndash; {queue_date.isoformat()}</h2>"
        f'<ul style="line-height:1.8">{rows}</ul>'
        f"<p><strong>Total: {len(items)} items</strong></p>"
        f"{flagged_section}"
        "</body></html>"
    )


def _build_text_email(items: list, queue_date: date, flagged: int = 0) -> str:
    lines = [f"Daily Queue Ready - {queue_date.isoformat()}", "=" * 40, ""]
    for item in items:
        name, company, action, url = _item_fields(item)
        entry = f"- {name}"
        if url:
            entry += f" ({url})"
        if company:
            entry += f" - {company}"
        lines.append(f"{entry} ({action})")
    lines.append("")
    lines.append(f"Total: {len(items)} items")
    if flagged:
        lines.append(f"{flagged} message(s) exceed 300 characters and need manual editing.")
    return "\n".join(lines)


def send_queue_ready_email(
    items: list,
    queue_date: date,
    recipient: str,
    settings=None,
    *,
    flagged: int = 0,
) -> bool:
    """Send the queue-ready notification listing the day's queue items.

    Returns True on success, False when skipped or on any SMTP failure.
    """
    if settings is None:
        settings = get_settings()

    if not recipient:
        logger.warning("email_send_skipped: no recipient configured")
        return False

    smtp_host = getattr(settings, "smtp_host", "")
    if not smtp_host:
        logger.warning("email_send_skipped: SMTP host not configured")
        return False

    msg = MIMEMultipart("alternative")
    msg["Subject"] = f"Daily Queue Ready - {queue_date.isoformat()} ({len(items)} items)"
    msg["From"] = getattr(settings, "smtp_from", "")
    msg["To"] = recipient
    msg.attach(MIMEText(_build_text_email(items, queue_date, flagged), "plain"))
    msg.attach(MIMEText(_build_html_email(items, queue_date, flagged), "html"))

    try:
        with smtplib.SMTP(smtp_host, getattr(settings, "smtp_port", 587)) as server:
            server.starttls()
            smtp_user = getattr(settings, "smtp_user", "")
            smtp_password = getattr(settings, "smtp_password", "")
            if smtp_user:
                server.login(smtp_user, smtp_password)
            server.sendmail(msg["From"], [recipient], msg.as_string())
        logger.info("email_sent: recipient=%s items=%d", recipient, len(items))
        return True
    except smtplib.SMTPAuthenticationError:
        logger.error("email_auth_failed: could not authenticate with SMTP server")
        return False
    except (smtplib.SMTPException, OSError) as exc:
        logger.error("email_send_failed: %s", exc)
        return False
