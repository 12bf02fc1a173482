from unittest import mock

import pytest
from django.core.exceptions import ImproperlyConfigured
from django.test import override_settings

from django_ai_index.conf import (
    get_data_sources,
    get_embedding_provider,
    get_index,
    get_vector_store_config,
)
from django_ai_index.contrib.connectors.schema import DatabaseType
from django_ai_index.contrib.index.embedding import (
    CoreEmbeddingProvider,
    HuggingFaceEmbeddingProvider,
)
from django_ai_index.contrib.index.embedding_cache import CachedEmbeddingProvider
from django_ai_index.contrib.index.storage import (
    InMemoryIndex,
    QdrantIndex,
    VectorStoreOptions,
)

EMBEDDING = {"PROVIDER": "huggingface", "MODEL": "all-MiniLM-L6-v2"}


class TestVectorStoreConfig:
    @override_settings(AI_INDEX={})
    def test_defaults_to_in_memory(self):
        config = get_vector_store_config()

        assert config.backend is VectorStoreOptions.IN_MEMORY
        assert config.extra_params == {}
        assert isinstance(get_index(), InMemoryIndex)

    @override_settings(
        AI_INDEX={
            "VECTOR_STORE": {
                "BACKEND": "qdrant",
                "CONNECTION_STRING": ":memory:",
                "EXTRA_PARAMS": {"topK": 3},
            }
        }
    )
    def test_qdrant(self):
        config = get_vector_store_config()

        assert config.backend is VectorStoreOptions.QDRANT
        assert config.extra_params == {"topK": "3"}
        assert isinstance(get_index(), QdrantIndex)

    @override_settings(AI_INDEX={"VECTOR_STORE": {"BACKEND": "milvus"}})
    def test_unknown_backend(self):
        with pytest.raises(ImproperlyConfigured):
            get_vector_store_config()


class TestEmbeddingProvider:
    @override_settings(AI_INDEX={"EMBEDDING": {**EMBEDDING, "API_TOKEN": "hf_test"}})
    def test_huggingface(self):
        provider = get_embedding_provider()

        assert isinstance(provider, HuggingFaceEmbeddingProvider)
        assert provider.model == "all-MiniLM-L6-v2"
        assert provider.api_token == "hf_test"

    @override_settings(AI_INDEX={"EMBEDDING": {**EMBEDDING, "CACHE": True}})
    def test_cached(self):
        provider = get_embedding_provider()

        assert isinstance(provider, CachedEmbeddingProvider)
        assert isinstance(provider.base_provider, HuggingFaceEmbeddingProvider)

    @override_settings(
        AI_INDEX={
            "EMBEDDING": {
                "PROVIDER": "core",
                "MODEL": "text-embedding-3-small",
                "LLM_OPTIONS": {"api_key": "sk-test"},
            }
        }
    )
    def test_core(self):
        with mock.patch("django_ai_index.llm.base.AnyLLM") as any_llm:
            provider = get_embedding_provider()

        any_llm.create.assert_called_once_with(provider="openai", api_key="sk-test")
        assert isinstance(provider, CoreEmbeddingProvider)
        assert provider.llm_service.model == "text-embedding-3-small"

    @override_settings(AI_INDEX={"EMBEDDING": {"PROVIDER": "word2vec", "MODEL": "x"}})
    def test_unknown_provider(self):
        with pytest.raises(ImproperlyConfigured, match="word2vec"):
            get_embedding_provider()

    @override_settings(AI_INDEX={"EMBEDDING": {"PROVIDER": "huggingface"}})
    def test_missing_model(self):
        with pytest.raises(ImproperlyConfigured, match="MODEL"):
            get_embedding_provider()

    @override_settings(AI_INDEX={})
    def test_not_configured(self):
        with pytest.raises(ImproperlyConfigured):
            get_embedding_provider()


class TestDataSources:
    @override_settings(
        AI_INDEX={
            "DATA_SOURCES": [
                {
                    "IDENTIFIER": "orders",
                    "DATABASE_TYPE": "PostgreSQL",
                    "HOST": "localhost:5432",
                    "DATABASE_NAME": "orders",
                    "USERNAME": "reader",
                    "PASSWORD": "secret",
                    "QUERY": "SELECT * FROM orders",
                }
            ]
        }
    )
    def test_sources_from_settings(self):
        [source] = get_data_sources()

        assert source.identifier == "orders"
        assert source.database_type is DatabaseType.POSTGRESQL
        assert source.username == "reader"
        assert source.query == "SELECT * FROM orders"

    @override_settings(AI_INDEX={})
    def test_no_sources(self):
        assert get_data_sources() == []

    @override_settings(
        AI_INDEX={
            "DATA_SOURCES": [
                {"IDENTIFIER": "graph", "DATABASE_TYPE": "neo4j", "HOST": "localhost"}
            ]
        }
    )
    def test_unknown_database_type(self):
        with pytest.raises(ImproperlyConfigured):
            get_data_sources()

    @override_settings(AI_INDEX={"DATA_SOURCES": [{"IDENTIFIER": "orders"}]})
    def test_missing_keys(self):
        with pytest.raises(ImproperlyConfigured):
            get_data_sources()
