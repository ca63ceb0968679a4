import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Property",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True)),
                (
                    "status",
                    models.CharField(
                        choices=[("draft", "Черновик"), ("active", "Активен"), ("inactive", "Неактивен")],
                        default="draft",
                        max_length=20,
                    ),
                ),
                (
                    "rental_mode",
                    models.CharField(
                        choices=[("Daily", "Посуточно"), ("Monthly", "Помесячно")],
                        default="Daily",
                        help_text="Смена режима при действующих бронированиях или договорах не поддерживается.",
                        max_length=10,
                    ),
                ),
                ("published_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "owner",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="properties",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Объект недвижимости",
                "verbose_name_plural": "Объекты недвижимости",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["status"], name="property_status_idx"),
                    models.Index(fields=["owner", "status"], name="property_owner_status_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="BlockedPeriod",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("start_date", models.DateField()),
                ("end_date", models.DateField()),
                ("reason", models.CharField(blank=True, max_length=255)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="created_blocked_periods",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "property",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="blocked_periods",
                        to="properties.property",
                    ),
                ),
            ],
            options={
                "verbose_name": "Блокировка",
                "verbose_name_plural": "Блокировки",
                "ordering": ["start_date"],
                "indexes": [
                    models.Index(fields=["property", "start_date", "end_date"], name="blocked_period_range_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("end_date__gt", models.F("start_date"))),
                        name="blocked_period_valid_date_range",
                    ),
                ],
            },
        ),
    ]
