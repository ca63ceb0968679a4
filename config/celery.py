import os

from celery import Celery
from celery.schedules import crontab  # type: ignore

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.dev")

app = Celery("rentals")

app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()


# ============================================================================
# CELERY BEAT SCHEDULE (Periodic Tasks)
# ============================================================================

app.conf.beat_schedule = {
    # Уведомления об окончании договоров - каждый день в 09:00
    "notify-expiring-leases": {
        "task": "rentals.notify_expiring_leases",
        "schedule": crontab(minute=0, hour=9),
    },
    # Завершение истёкших договоров - каждый день в 00:30
    "deactivate-expired-leases": {
        "task": "rentals.deactivate_expired_leases",
        "schedule": crontab(minute=30, hour=0),
    },
    # Перевод броней в статус Active - каждый час
    "update-in-progress-bookings": {
        "task": "bookings.update_in_progress_bookings",
        "schedule": crontab(minute=0),
    },
    # Завершение броней после выезда - каждый час
    "complete-finished-bookings": {
        "task": "bookings.complete_finished_bookings",
        "schedule": crontab(minute=15),
    },
}

app.conf.timezone = "Asia/Almaty"
