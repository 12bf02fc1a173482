"""
Settings for django-ai-index.

All configuration lives in the ``AI_INDEX`` setting::

    AI_INDEX = {
        "VECTOR_STORE": {
            "BACKEND": "qdrant",
            "CONNECTION_STRING": "http://localhost:6333",
            "EXTRA_PARAMS": {"topK": "3"},
        },
        "EMBEDDING": {
            "PROVIDER": "huggingface",
            "MODEL": "all-MiniLM-L6-v2",
            "API_TOKEN": "hf_...",
            "CACHE": True,
        },
        "DATA_SOURCES": [
            {
                "IDENTIFIER": "orders",
                "DATABASE_TYPE": "postgresql",
                "HOST": "localhost:5432",
                "DATABASE_NAME": "orders",
                "USERNAME": "reader",
                "PASSWORD": "...",
                "QUERY": "SELECT * FROM orders",
            },
        ],
    }
"""

from typing import TYPE_CHECKING, Any

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

from django_ai_index.contrib.connectors.schema import DatabaseType, SQLDataSource
from django_ai_index.contrib.index.storage import (
    VectorStoreConfig,
    VectorStoreOptions,
    build_index,
)

if TYPE_CHECKING:
    from django_ai_index.contrib.index.embedding import EmbeddingProvider
    from django_ai_index.contrib.index.storage import Index


def get_setting(name: str, default: Any = None) -> Any:
    return getattr(settings, "AI_INDEX", {}).get(name, default)


def get_vector_store_config() -> VectorStoreConfig:
    options = get_setting("VECTOR_STORE", {"BACKEND": VectorStoreOptions.IN_MEMORY})
    try:
        backend = VectorStoreOptions(options["BACKEND"])
    except (KeyError, ValueError) as e:
        raise ImproperlyConfigured(
            f"AI_INDEX['VECTOR_STORE']['BACKEND'] must be one of "
            f"{[option.value for option in VectorStoreOptions]}"
        ) from e

    return VectorStoreConfig(
        backend=backend,
        connection_string=options.get("CONNECTION_STRING", ""),
        extra_params={
            key: str(value) for key, value in options.get("EXTRA_PARAMS", {}).items()
        },
    )


def get_index() -> "Index":
    return build_index(get_vector_store_config())


def get_embedding_provider() -> "EmbeddingProvider":
    from django_ai_index.contrib.index.embedding import (
        CoreEmbeddingProvider,
        HuggingFaceEmbeddingProvider,
    )
    from django_ai_index.contrib.index.embedding_cache import CachedEmbeddingProvider
    from django_ai_index.llm import LLMService

    options = get_setting("EMBEDDING")
    if not options:
        raise ImproperlyConfigured("AI_INDEX['EMBEDDING'] must be configured")

    provider_name = options.get("PROVIDER", "huggingface")
    try:
        model = options["MODEL"]
    except KeyError as e:
        raise ImproperlyConfigured("AI_INDEX['EMBEDDING']['MODEL'] is required") from e

    if provider_name == "huggingface":
        provider = HuggingFaceEmbeddingProvider(
            model=model, api_token=options.get("API_TOKEN", "")
        )
    elif provider_name == "core":
        llm_service = LLMService.create(
            provider=options.get("LLM_PROVIDER", "openai"),
            model=model,
            **options.get("LLM_OPTIONS", {}),
        )
        provider = CoreEmbeddingProvider(llm_service)
    else:
        raise ImproperlyConfigured(
            f"Unknown embedding provider '{provider_name}', "
            "expected 'huggingface' or 'core'"
        )

    if options.get("CACHE", False):
        return CachedEmbeddingProvider(base_provider=provider)
    return provider


def get_data_sources() -> list[SQLDataSource]:
    sources = []
    for options in get_setting("DATA_SOURCES", []):
        try:
            sources.append(
                SQLDataSource(
                    identifier=options["IDENTIFIER"],
                    database_type=DatabaseType(options["DATABASE_TYPE"].lower()),
                    host=options["HOST"],
                    database_name=options.get("DATABASE_NAME", ""),
                    username=options.get("USERNAME", ""),
                    password=options.get("PASSWORD", ""),
                    query=options.get("QUERY"),
                )
            )
        except (KeyError, ValueError) as e:
            raise ImproperlyConfigured(
                f"Invalid AI_INDEX['DATA_SOURCES'] entry: {e}"
            ) from e
    return sources
