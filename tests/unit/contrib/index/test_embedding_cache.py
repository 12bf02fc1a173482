from unittest import mock

import pytest

from django_ai_index.contrib.index.embedding import EmbeddingProvider
from django_ai_index.contrib.index.embedding_cache import (
    CachedEmbeddingProvider,
    EmbeddingCacheBackend,
)
from django_ai_index.contrib.index.models import EmbeddingCache


class DictCacheBackend(EmbeddingCacheBackend):
    def __init__(self):
        self.entries = {}

    def get_embedding(self, content, provider_id):
        return self.entries.get((content, provider_id))

    def store_embedding(self, content, provider_id, embedding):
        self.entries[(content, provider_id)] = embedding

    def clear_cache(self):
        self.entries.clear()


def create_base_provider(provider_id="base", embedding=None):
    provider = mock.Mock(spec=EmbeddingProvider)
    provider.provider_id = provider_id
    provider.get_embedding.return_value = embedding or [0.1, 0.2, 0.3]
    return provider


class TestCachedEmbeddingProvider:
    def test_cache_miss_then_hit(self):
        base = create_base_provider()
        provider = CachedEmbeddingProvider(base, cache_backend=DictCacheBackend())

        assert provider.get_embedding("hello") == [0.1, 0.2, 0.3]
        assert provider.get_embedding("hello") == [0.1, 0.2, 0.3]

        base.get_embedding.assert_called_once_with("hello")
        assert provider.cache_hits == 1

    def test_entries_are_keyed_on_base_provider(self):
        backend = DictCacheBackend()
        small = CachedEmbeddingProvider(
            create_base_provider("small", [0.1, 0.2]), cache_backend=backend
        )
        large = CachedEmbeddingProvider(
            create_base_provider("large", [0.1, 0.2, 0.3, 0.4]), cache_backend=backend
        )

        assert small.get_embedding("hello") == [0.1, 0.2]
        assert large.get_embedding("hello") == [0.1, 0.2, 0.3, 0.4]

    def test_provider_id(self):
        provider = CachedEmbeddingProvider(
            create_base_provider("huggingface_model"), cache_backend=DictCacheBackend()
        )

        assert provider.provider_id == "cached_huggingface_model"

    def test_errors_are_not_cached(self):
        base = create_base_provider()
        base.get_embedding.side_effect = RuntimeError("boom")
        backend = DictCacheBackend()
        provider = CachedEmbeddingProvider(base, cache_backend=backend)

        with pytest.raises(RuntimeError):
            provider.get_embedding("hello")

        assert backend.entries == {}


@pytest.mark.django_db
class TestDjangoEmbeddingCacheBackend:
    def test_embeddings_are_stored_in_database(self):
        base = create_base_provider("base")
        provider = CachedEmbeddingProvider(base)

        provider.get_embedding("hello")
        provider.get_embedding("hello")

        entry = EmbeddingCache.objects.get()
        assert entry.content == "hello"
        assert entry.embedding_provider_id == "base"
        assert entry.embedding_dimensions == 3
        assert entry.content_hash == EmbeddingCache.hash_content("hello")
        base.get_embedding.assert_called_once()
        assert provider.cache_hits == 1
        assert provider.cache_misses == 1

    def test_clear_cache(self):
        provider = CachedEmbeddingProvider(create_base_provider())
        provider.get_embedding("hello")

        provider.cache_backend.clear_cache()

        assert not EmbeddingCache.objects.exists()

    def test_existing_entry_is_kept(self):
        _, created = EmbeddingCache.store(
            content="hello", provider_id="base", vector=[0.1]
        )
        _, created_again = EmbeddingCache.store(
            content="hello", provider_id="base", vector=[0.2]
        )

        assert created
        assert not created_again
        assert EmbeddingCache.lookup(content="hello", provider_id="base") == [0.1]

    def test_lookup_is_scoped_to_provider(self):
        EmbeddingCache.store(content="hello", provider_id="base", vector=[0.1])

        assert EmbeddingCache.lookup(content="hello", provider_id="other") is None
