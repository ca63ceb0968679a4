"""Property domain models.

Объект недвижимости работает в одном из двух режимов аренды: посуточно
(Daily) или помесячно (Monthly). Владелец может закрывать объект на
периоды (BlockedPeriod), которые конфликтуют с любым режимом.
"""

from __future__ import annotations

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Property(models.Model):
    """Объект недвижимости, сдаваемый посуточно или помесячно."""

    class Status(models.TextChoices):
        DRAFT = "draft", _("Черновик")
        ACTIVE = "active", _("Активен")
        INACTIVE = "inactive", _("Неактивен")

    class RentalMode(models.TextChoices):
        DAILY = "Daily", _("Посуточно")
        MONTHLY = "Monthly", _("Помесячно")

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="properties",
    )
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.DRAFT)
    rental_mode = models.CharField(
        max_length=10,
        choices=RentalMode.choices,
        default=RentalMode.DAILY,
        help_text=_("Смена режима при действующих бронированиях или договорах не поддерживается."),
    )
    published_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Объект недвижимости")
        verbose_name_plural = _("Объекты недвижимости")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="property_status_idx"),
            models.Index(fields=["owner", "status"], name="property_owner_status_idx"),
        ]

    def __str__(self) -> str:
        return self.title

    def activate(self) -> None:
        if self.status != self.Status.ACTIVE:
            self.status = self.Status.ACTIVE
            self.published_at = timezone.now()
            self.save(update_fields=["status", "published_at"])


class BlockedPeriod(models.Model):
    """Период, закрытый владельцем. Интервал полуоткрытый: [start_date, end_date)."""

    property = models.ForeignKey(
        Property,
        on_delete=models.CASCADE,
        related_name="blocked_periods",
    )
    start_date = models.DateField()
    end_date = models.DateField()
    reason = models.CharField(max_length=255, blank=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="created_blocked_periods",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Блокировка")
        verbose_name_plural = _("Блокировки")
        ordering = ["start_date"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_date__gt=models.F("start_date")),
                name="blocked_period_valid_date_range",
            ),
        ]
        indexes = [
            models.Index(fields=["property", "start_date", "end_date"], name="blocked_period_range_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.property.title}: {self.start_date} - {self.end_date}"
