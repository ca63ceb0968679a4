"""Rental persistence models: tenants and rental requests."""

from __future__ import annotations

from django.conf import settings  # type: ignore
from django.core.validators import MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Tenant(models.Model):
    """Арендатор по долгосрочному договору.

    Дата окончания договора не хранится: она вычисляется из последней
    одобренной заявки того же пользователя на тот же объект.
    """

    class Status(models.TextChoices):
        ACTIVE = "Active", _("Действует")
        INACTIVE = "Inactive", _("Завершён")

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="tenancies",
    )
    property = models.ForeignKey(
        "properties.Property",
        on_delete=models.CASCADE,
        related_name="tenants",
    )
    lease_start = models.DateField()
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.ACTIVE)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Арендатор")
        verbose_name_plural = _("Арендаторы")
        ordering = ["-lease_start"]
        constraints = [
            models.UniqueConstraint(
                fields=["user", "property"],
                condition=models.Q(status="Active"),
                name="tenant_single_active_per_user_property",
            ),
        ]
        indexes = [
            models.Index(fields=["property", "status"], name="tenant_property_status_idx"),
        ]

    def __str__(self) -> str:
        return f"Tenant #{self.pk} ({self.user_id} @ {self.property_id})"


class RentalRequest(models.Model):
    """Заявка на долгосрочную аренду."""

    class Status(models.TextChoices):
        PENDING = "Pending", _("Ожидает ответа")
        APPROVED = "Approved", _("Одобрена")
        REJECTED = "Rejected", _("Отклонена")
        WITHDRAWN = "Withdrawn", _("Отозвана")

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="rental_requests",
    )
    property = models.ForeignKey(
        "properties.Property",
        on_delete=models.CASCADE,
        related_name="rental_requests",
    )
    proposed_start = models.DateField()
    proposed_end = models.DateField()
    lease_duration_months = models.PositiveSmallIntegerField(validators=[MinValueValidator(1)])
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.PENDING)
    message = models.TextField(blank=True)
    request_date = models.DateTimeField(default=timezone.now)
    landlord_response = models.TextField(blank=True)
    response_date = models.DateTimeField(null=True, blank=True)

    class Meta:
        verbose_name = _("Заявка на аренду")
        verbose_name_plural = _("Заявки на аренду")
        ordering = ["-request_date"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(proposed_end__gt=models.F("proposed_start")),
                name="rental_request_valid_dates",
            ),
        ]
        indexes = [
            models.Index(fields=["property", "status", "proposed_start", "proposed_end"], name="rental_req_property_idx"),
            models.Index(fields=["user", "property", "status"], name="rental_req_user_prop_idx"),
        ]

    def __str__(self) -> str:
        return f"RentalRequest #{self.pk} ({self.status})"
