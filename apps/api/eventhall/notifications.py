"""
Outbound notifications.

Requests only enqueue; rendering and delivery happen in the worker. A
notification that cannot be enqueued is logged and dropped so that it never
fails the write that triggered it.
"""

from __future__ import annotations

from typing import Any

import structlog

logger = structlog.get_logger()

NEW_USER_ACCOUNT = "new_user_account"
CONTACT_MESSAGE = "contact_message"


def _new_user_account(payload: dict[str, Any]) -> tuple[str, str]:
    body = (
        f"Welkom {payload['name']}\n\n"
        "Er is een account voor je aangemaakt.\n\n"
        f"E-mailadres: {payload['email']}\n"
        f"Tijdelijk wachtwoord: {payload['password']}\n\n"
        "Log in via de onderstaande link en wijzig vervolgens je wachtwoord.\n"
        f"{payload['login_url']}\n"
    )
    return "Je account is aangemaakt", body


def _contact_message(payload: dict[str, Any]) -> tuple[str, str]:
    body = (
        "Nieuw contactformulier bericht\n\n"
        f"Naam: {payload['name']}\n"
        f"E-mail: {payload['email']}\n"
        f"Onderwerp: {payload['subject']}\n\n"
        f"{payload['message']}\n"
    )
    return f"[Contact] {payload['subject']}", body


TEMPLATES = {
    NEW_USER_ACCOUNT: _new_user_account,
    CONTACT_MESSAGE: _contact_message,
}


def render_notification(template_id: str, payload: dict[str, Any]) -> tuple[str, str]:
    try:
        renderer = TEMPLATES[template_id]
    except KeyError:
        raise ValueError(f"unknown notification template: {template_id}") from None
    return renderer(payload)


def notify(template_id: str, recipient: str, payload: dict[str, Any]) -> bool:
    """Enqueue a notification. Returns False when it could not be queued."""
    # Imported here so the API process does not load the worker at import time.
    from eventhall.worker.tasks import deliver_notification

    try:
        if template_id not in TEMPLATES:
            raise ValueError(f"unknown notification template: {template_id}")
        deliver_notification.delay(template_id, recipient, payload)
    except Exception:
        logger.exception("notification_failed", template=template_id, recipient=recipient)
        return False

    logger.info("notification_queued", template=template_id, recipient=recipient)
    return True
