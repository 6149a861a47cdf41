"""
n8n webhook delivery.
Challenge: Notify external automations (margin alerts, lead routing, reset emails)
without ever failing the user action that triggered them.
Design: Fire-and-forget POST; missing URL means log-only (dev); errors are logged, not raised, not retried.
"""

import logging
from typing import Any

import httpx

from kalkyla.config import get_settings
from kalkyla.core.timeutils import utcnow

logger = logging.getLogger(__name__)

MARGIN_ALERT = "margin-alert"
LEAD_NOTIFICATION = "lead-notification"
PASSWORD_RESET = "password-reset"


def _webhook_url(webhook_type: str) -> str | None:
    settings = get_settings()
    urls = {
        MARGIN_ALERT: settings.n8n_webhook_margin_alert,
        LEAD_NOTIFICATION: settings.n8n_webhook_lead_notification,
        PASSWORD_RESET: settings.n8n_webhook_password_reset,
    }
    return urls.get(webhook_type) or None


def build_body(webhook_type: str, payload: dict[str, Any]) -> dict[str, Any]:
    settings = get_settings()
    return {
        **payload,
        "webhookType": webhook_type,
        "timestamp": utcnow().isoformat(),
        "source": "kalkyla",
        "environment": settings.environment,
    }


def post_json(url: str, body: dict[str, Any], *, label: str) -> bool:
    """POST body to url with the shared secret header. True on 2xx."""
    settings = get_settings()
    headers = {"Content-Type": "application/json"}
    if settings.n8n_webhook_secret:
        headers["X-Webhook-Secret"] = settings.n8n_webhook_secret
    try:
        response = httpx.post(url, json=body, headers=headers, timeout=settings.webhook_timeout_seconds)
    except httpx.HTTPError as exc:
        logger.error("[N8N] %s webhook error: %s", label, exc)
        return False
    if response.is_success:
        logger.info("[N8N] %s webhook sent", label)
        return True
    logger.error("[N8N] %s webhook failed: %s %s", label, response.status_code, response.reason_phrase)
    return False


def trigger_webhook(webhook_type: str, payload: dict[str, Any]) -> bool:
    url = _webhook_url(webhook_type)
    if not url:
        logger.info("[N8N] %s (webhook not configured): %s", webhook_type, payload)
        return False
    return post_json(url, build_body(webhook_type, payload), label=webhook_type)
