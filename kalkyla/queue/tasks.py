"""
Celery tasks - webhook delivery and electricity price import.
Challenge: Webhooks are fire-and-forget; price import runs daily and on demand.
"""

import asyncio
import datetime as dt
import logging
from typing import Any

from kalkyla.integrations import n8n
from kalkyla.queue.celery_app import celery_app

logger = logging.getLogger(__name__)


def _run_async(coro):
    """Run async function from sync Celery task."""
    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@celery_app.task
def deliver_webhook_task(webhook_type: str, payload: dict[str, Any]) -> bool:
    """POST to the configured n8n URL for webhook_type. No retry."""
    return n8n.trigger_webhook(webhook_type, payload)


@celery_app.task
def deliver_company_webhook_task(url: str, payload: dict[str, Any]) -> bool:
    """Company-owned lead webhook."""
    return n8n.post_json(url, n8n.build_body(n8n.LEAD_NOTIFICATION, payload), label="company")


@celery_app.task(bind=True, max_retries=3)
def fetch_daily_prices_task(self, date_iso: str | None = None):
    """Import one day's prices (default today) and refresh that quarter's averages."""
    from kalkyla.services.electricity_service import import_day_and_refresh_quarter

    day = dt.date.fromisoformat(date_iso) if date_iso else dt.date.today()
    try:
        return _run_async(import_day_and_refresh_quarter(day))
    except Exception as exc:
        raise self.retry(exc=exc, countdown=300)


def dispatch_webhook(webhook_type: str, payload: dict[str, Any]) -> None:
    """Queue a webhook; a broker outage is logged and swallowed so callers never fail."""
    try:
        deliver_webhook_task.delay(webhook_type, payload)
    except Exception:
        logger.exception("Could not enqueue %s webhook", webhook_type)


def dispatch_company_webhook(url: str, payload: dict[str, Any]) -> None:
    try:
        deliver_company_webhook_task.delay(url, payload)
    except Exception:
        logger.exception("Could not enqueue company webhook")
