from .embedding import (
    CoreEmbeddingProvider,
    EmbeddingProvider,
    EmbeddingProviderError,
    HuggingFaceEmbeddingProvider,
)
from .embedding_cache import (
    CachedEmbeddingProvider,
)
from .schema import (
    APIDocument,
    Document,
    SourceType,
    SQLDocument,
)
from .storage import (
    Index,
    VectorStoreConfig,
    VectorStoreOptions,
    build_index,
)

__all__ = [
    "APIDocument",
    "CachedEmbeddingProvider",
    "CoreEmbeddingProvider",
    "Document",
    "EmbeddingProvider",
    "EmbeddingProviderError",
    "HuggingFaceEmbeddingProvider",
    "Index",
    "SQLDocument",
    "SourceType",
    "VectorStoreConfig",
    "VectorStoreOptions",
    "build_index",
]
