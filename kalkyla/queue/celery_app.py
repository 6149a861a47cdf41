"""
Celery application - background delivery of webhooks and scheduled price imports.
Challenge: Keep outbound HTTP off the request path.
Design: RabbitMQ broker, Redis result backend; eager mode for tests and single-process dev.
"""

from celery import Celery
from celery.schedules import crontab

from kalkyla.config import get_settings

settings = get_settings()

celery_app = Celery(
    "kalkyla",
    broker=settings.celery_broker_url,
    backend=settings.redis_url,
    include=["kalkyla.queue.tasks"],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    task_track_started=True,
    task_time_limit=300,
    task_soft_time_limit=60,
    worker_prefetch_multiplier=1,
    task_always_eager=settings.celery_task_always_eager,
    task_ignore_result=settings.celery_task_always_eager,
    timezone="Europe/Stockholm",
    beat_schedule={
        # Nord Pool publishes next-day prices early afternoon
        "fetch-daily-electricity-prices": {
            "task": "kalkyla.queue.tasks.fetch_daily_prices_task",
            "schedule": crontab(hour=14, minute=30),
        },
    },
)
