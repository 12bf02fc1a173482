from django.apps import AppConfig


class IndexConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "django_ai_index.contrib.index"
    label = "django_ai_index_index"
    verbose_name = "Django AI Index Vector Indexing Module"
