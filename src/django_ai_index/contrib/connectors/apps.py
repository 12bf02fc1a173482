from django.apps import AppConfig


class ConnectorsConfig(AppConfig):
    name = "django_ai_index.contrib.connectors"
    label = "django_ai_index_connectors"
    verbose_name = "Django AI Index Data Connectors"

    def ready(self):
        from django_ai_index.conf import get_data_sources

        from .registry import registry

        for source in get_data_sources():
            registry.register(source)
