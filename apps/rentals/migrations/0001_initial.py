import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("properties", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Tenant",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("lease_start", models.DateField()),
                (
                    "status",
                    models.CharField(
                        choices=[("Active", "Действует"), ("Inactive", "Завершён")],
                        default="Active",
                        max_length=10,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "property",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="tenants",
                        to="properties.property",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="tenancies",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Арендатор",
                "verbose_name_plural": "Арендаторы",
                "ordering": ["-lease_start"],
                "indexes": [
                    models.Index(fields=["property", "status"], name="tenant_property_status_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(("status", "Active")),
                        fields=("user", "property"),
                        name="tenant_single_active_per_user_property",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="RentalRequest",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("proposed_start", models.DateField()),
                ("proposed_end", models.DateField()),
                (
                    "lease_duration_months",
                    models.PositiveSmallIntegerField(validators=[django.core.validators.MinValueValidator(1)]),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("Pending", "Ожидает ответа"),
                            ("Approved", "Одобрена"),
                            ("Rejected", "Отклонена"),
                            ("Withdrawn", "Отозвана"),
                        ],
                        default="Pending",
                        max_length=10,
                    ),
                ),
                ("message", models.TextField(blank=True)),
                ("request_date", models.DateTimeField(default=django.utils.timezone.now)),
                ("landlord_response", models.TextField(blank=True)),
                ("response_date", models.DateTimeField(blank=True, null=True)),
                (
                    "property",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="rental_requests",
                        to="properties.property",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="rental_requests",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Заявка на аренду",
                "verbose_name_plural": "Заявки на аренду",
                "ordering": ["-request_date"],
                "indexes": [
                    models.Index(
                        fields=["property", "status", "proposed_start", "proposed_end"],
                        name="rental_req_property_idx",
                    ),
                    models.Index(fields=["user", "property", "status"], name="rental_req_user_prop_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("proposed_end__gt", models.F("proposed_start"))),
                        name="rental_request_valid_dates",
                    ),
                ],
            },
        ),
    ]
