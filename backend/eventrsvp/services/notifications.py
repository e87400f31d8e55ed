"""Outbound email notifications.

Delivery is best-effort: the mutation that triggered a notification has
already been committed, so every failure here is logged and dropped.
"""
import logging
from datetime import datetime
from typing import Optional, Protocol

import httpx
import pytz

from eventrsvp.config import settings

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def send(self, to: str, subject: str, html: str) -> None:
        ...


class EmailNotifier:
    """Sends HTML email through the Resend HTTP API."""

    def __init__(
        self,
        api_key: str,
        sender: str,
        api_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.api_key = api_key
        self.sender = sender
        self.api_url = api_url
        self.timeout = timeout
        self.transport = transport

    def send(self, to: str, subject: str, html: str) -> None:
        if not self.api_key:
            logger.info("Email to %s not sent: RESEND_API_KEY is not configured", to)
            return
        with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
            response = client.post(
                self.api_url,
                json={
                    "from": f"Event RSVP <{self.sender}>",
                    "to": [to],
                    "subject": subject,
                    "html": html,
                },
                headers={"Authorization": f"Bearer {self.api_key}"},
            )
        response.raise_for_status()
        logger.info("Email '%s' sent to %s", subject, to)


def get_notifier() -> Notifier:
    """FastAPI dependency: overridden in tests."""
    return EmailNotifier(
        api_key=settings.RESEND_API_KEY,
        sender=settings.SENDER_EMAIL,
        api_url=settings.RESEND_API_URL,
        timeout=settings.EMAIL_TIMEOUT_SECONDS,
    )


def _format_date(value: datetime) -> str:
    if value.tzinfo is None:
        value = pytz.utc.localize(value)
    local = value.astimezone(pytz.timezone(settings.DISPLAY_TIMEZONE))
    return local.strftime("%A, %B %d, %Y at %I:%M %p %Z")


def _deliver(notifier: Notifier, to: str, subject: str, html: str) -> bool:
    try:
        notifier.send(to, subject, html)
    except httpx.HTTPError as e:
        logger.warning("Email '%s' to %s failed: %s", subject, to, e)
        return False
    except Exception:
        logger.exception("Unexpected error sending email '%s' to %s", subject, to)
        return False
    return True


def notify_rsvp(
    notifier: Notifier,
    to: str,
    name: str,
    event_title: str,
    event_date: datetime,
    address: str,
    status: str,
    attendee_id: Optional[str] = None,
) -> bool:
    """Send an RSVP confirmation. Returns False if delivery failed."""
    id_line = f"<p>Your attendee ID: <strong>{attendee_id}</strong></p>" if attendee_id else ""
    html = f"""
    <h2>RSVP Confirmation</h2>
    <p>Hi {name},</p>
    <p>Your RSVP for <strong>{event_title}</strong> has been recorded.</p>
    <ul>
        <li>Date: {_format_date(event_date)}</li>
        <li>Location: {address}</li>
        <li>Status: {status}</li>
    </ul>
    {id_line}
    """
    return _deliver(notifier, to, f"RSVP Confirmation: {event_title}", html)


def notify_registration(notifier: Notifier, to: str, name: str) -> bool:
    """Send a welcome email after registration. Returns False if delivery failed."""
    html = f"""
    <h2>Welcome, {name}!</h2>
    <p>Your account has been created. You can now RSVP to events.</p>
    """
    return _deliver(notifier, to, "Welcome to Event RSVP", html)
