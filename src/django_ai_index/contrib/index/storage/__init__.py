from .base import Index, VectorStoreConfig, VectorStoreOptions
from .inmemory import InMemoryIndex
from .pgvector import PgVectorIndex
from .qdrant import QdrantIndex

__all__ = [
    "Index",
    "InMemoryIndex",
    "PgVectorIndex",
    "QdrantIndex",
    "VectorStoreConfig",
    "VectorStoreOptions",
    "build_index",
]


def build_index(config: VectorStoreConfig, **kwargs) -> Index:
    """Build the Index implementation selected by ``config.backend``."""
    backend = VectorStoreOptions(config.backend)
    if backend is VectorStoreOptions.IN_MEMORY:
        return InMemoryIndex(config=config, **kwargs)
    elif backend is VectorStoreOptions.QDRANT:
        return QdrantIndex(config=config, **kwargs)
    elif backend is VectorStoreOptions.PGVECTOR:
        return PgVectorIndex(config=config, **kwargs)

    raise ValueError(f"Unsupported vector store backend: {config.backend}")
