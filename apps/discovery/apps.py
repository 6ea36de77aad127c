from django.apps import AppConfig  # type: ignore


class DiscoveryConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.discovery"
    label = "discovery"
    verbose_name = "Discovery"
