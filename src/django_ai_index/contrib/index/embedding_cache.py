"""
Embedding cache for vector indexing.

Re-indexing a source whose schema or rows have not changed produces the same
texts again, so their vectors are looked up instead of requested again.
"""

import logging
from abc import ABC, abstractmethod
from functools import cached_property

from .embedding import EmbeddingProvider

logger = logging.getLogger(__name__)


class EmbeddingCacheBackend(ABC):
    """Stores vectors keyed by text and embedding provider id."""

    @abstractmethod
    def get_embedding(self, content: str, provider_id: str) -> list[float] | None:
        pass

    @abstractmethod
    def store_embedding(
        self, content: str, provider_id: str, embedding: list[float]
    ) -> None:
        pass

    @abstractmethod
    def clear_cache(self) -> None:
        pass


class DjangoEmbeddingCacheBackend(EmbeddingCacheBackend):
    """Keeps vectors in the EmbeddingCache model."""

    @cached_property
    def model(self):
        # Resolved on first use so a backend can be built before apps are loaded
        from .models import EmbeddingCache

        return EmbeddingCache

    def get_embedding(self, content: str, provider_id: str) -> list[float] | None:
        return self.model.lookup(content=content, provider_id=provider_id)

    def store_embedding(
        self, content: str, provider_id: str, embedding: list[float]
    ) -> None:
        self.model.store(content=content, provider_id=provider_id, vector=embedding)

    def clear_cache(self) -> None:
        deleted, _ = self.model.objects.all().delete()
        logger.info(f"Cleared {deleted} cached embedding(s)")


class CachedEmbeddingProvider(EmbeddingProvider):
    """
    Wraps another provider and consults a cache before calling it.

    Entries are keyed on the wrapped provider's id, so switching models never
    serves a vector of the wrong dimensionality. Failed requests are not cached.
    """

    def __init__(
        self,
        base_provider: EmbeddingProvider,
        cache_backend: EmbeddingCacheBackend | None = None,
    ):
        self.base_provider = base_provider
        self.cache_backend = cache_backend or DjangoEmbeddingCacheBackend()
        self.cache_hits = 0
        self.cache_misses = 0

    @property
    def provider_id(self) -> str:
        return f"cached_{self.base_provider.provider_id}"

    def get_embedding(self, text: str) -> list[float]:
        key = self.base_provider.provider_id
        embedding = self.cache_backend.get_embedding(text, key)
        if embedding is not None:
            self.cache_hits += 1
            return embedding

        self.cache_misses += 1
        logger.debug(f"No cached embedding from {key}, requesting one")
        embedding = self.base_provider.get_embedding(text)
        self.cache_backend.store_embedding(text, key, embedding)
        return embedding
