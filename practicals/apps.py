from django.apps import AppConfig


class PracticalsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "practicals"
    verbose_name = "Practicals"
