from django.apps import AppConfig


class SlipsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "slips"
    verbose_name = "Bordereaux"
