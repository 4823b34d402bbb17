from django.apps import AppConfig


class ExposConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"  # type: ignore
    name = "apps.expos"
    verbose_name = "Expos"
