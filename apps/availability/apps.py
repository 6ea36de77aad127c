from django.apps import AppConfig  # type: ignore


class AvailabilityConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.availability"
    label = "availability"
    verbose_name = "Availability"
