from celery import Celery
from celery.schedules import crontab
from .config import settings


celery_app = Celery(
    "reminders",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
)

celery_app.conf.update(
    task_acks_late=True,
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    worker_prefetch_multiplier=1,
    timezone=settings.SWEEP_TIMEZONE,
    enable_utc=True,
    include=["remindpay.reminders.tasks"],
)

# Celery Beat schedule for the daily overdue sweep
celery_app.conf.beat_schedule = {
    "sweep-overdue-reminders": {
        "task": "reminders.sweep_overdue",
        "schedule": crontab(hour=settings.SWEEP_HOUR, minute=settings.SWEEP_MINUTE),
    },
}
