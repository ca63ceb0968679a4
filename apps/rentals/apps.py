from django.apps import AppConfig  # type: ignore


class RentalsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.rentals"
    label = "rentals"

    def ready(self) -> None:
        from . import handlers  # noqa: F401
