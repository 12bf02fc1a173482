from django.apps import AppConfig


class CoreConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "django_ai_index"
    label = "django_ai_index"
    verbose_name = "Django AI Index"
