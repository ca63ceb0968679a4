"""Celery tasks for the booking domain."""

from __future__ import annotations

import logging
from datetime import timedelta

from celery import shared_task  # type: ignore
from django.db.models import Q  # type: ignore
from django.utils import timezone  # type: ignore

from .models import Booking

logger = logging.getLogger(__name__)


# ============================================================================
# PERIODIC TASKS (запускаются автоматически через Celery Beat)
# ============================================================================

@shared_task(name="bookings.update_in_progress_bookings")
def update_in_progress_bookings() -> dict[str, int]:
    """
    Перевод предстоящих броней в статус Active в день заезда.

    Returns:
        dict: {"updated": количество обновленных броней}
    """
    today = timezone.localdate()
    updated = Booking.objects.filter(
        status=Booking.Status.UPCOMING,
        start_date__lte=today,
    ).update(status=Booking.Status.ACTIVE, updated_at=timezone.now())

    if updated:
        logger.info("Marked %d bookings as active", updated)
    return {"updated": updated}


@shared_task(name="bookings.complete_finished_bookings")
def complete_finished_bookings() -> dict[str, int]:
    """
    Завершение броней после выезда.

    Открытая бронь (без end_date) занимает одни сутки, поэтому
    завершается на следующий день после заезда.

    Returns:
        dict: {"completed": количество завершенных броней}
    """
    today = timezone.localdate()
    finished = Q(end_date__lte=today) | Q(end_date__isnull=True, start_date__lte=today - timedelta(days=1))
    completed = Booking.objects.filter(status=Booking.Status.ACTIVE).filter(finished).update(
        status=Booking.Status.COMPLETED, updated_at=timezone.now(),
    )

    if completed:
        logger.info("Completed %d finished bookings", completed)
    return {"completed": completed}
