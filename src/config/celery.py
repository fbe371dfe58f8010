"""Celery configuration."""
import os

from celery import Celery
from celery.schedules import crontab

os.environ.setdefault(
    "DJANGO_SETTINGS_MODULE",
    os.getenv("DJANGO_SETTINGS_MODULE", "config.settings.prod"),
)

app = Celery("visatrack")
app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()

# Beat schedule
app.conf.beat_schedule = {
    "refresh-visa-statuses": {
        "task": "employees.tasks.refresh_visa_statuses",
        "schedule": crontab(minute=30, hour=0),  # Daily at 00:30
    },
    "send-visa-notifications": {
        "task": "notifications.tasks.send_visa_notifications",
        "schedule": crontab(minute=0, hour=8),  # Daily at 8am
    },
}
