import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Sequence

from asgiref.sync import sync_to_async

from ..schema import Document

logger = logging.getLogger(__name__)

# Key in VectorStoreConfig.extra_params that overrides the caller's top_k
TOP_K_PARAM = "topK"


class VectorStoreOptions(str, Enum):
    IN_MEMORY = "in_memory"
    QDRANT = "qdrant"
    PGVECTOR = "pgvector"


@dataclass(frozen=True)
class VectorStoreConfig:
    backend: VectorStoreOptions
    connection_string: str = ""
    extra_params: dict[str, str] = field(default_factory=dict)


class Index(ABC):
    """Base class for vector indexes.

    Every public operation is scoped to a collection named by a document's
    ``source_name``. Backend failures never escape the public operations: they
    are logged and reported as ``False`` (writes) or an empty list (searches).
    Subclasses implement the collection and row hooks and may raise freely.
    """

    def __init__(self, *, config: VectorStoreConfig | None = None, **kwargs):
        self.config = config

    @property
    def extra_params(self) -> dict[str, str]:
        return self.config.extra_params if self.config else {}

    def effective_top_k(self, top_k: int) -> int:
        override = self.extra_params.get(TOP_K_PARAM)
        if override is None:
            return top_k
        return int(override)

    def ensure_collection(self, document: Document):
        """Create the document's collection if needed, then load it."""
        if not self.has_collection(document.source_name):
            logger.info(
                f"Creating collection {document.source_name} "
                f"with {document.dimensions} dimensions"
            )
            self.create_collection(
                document.source_name, dimensions=document.dimensions
            )
        self.load_collection(document.source_name)

    def index_document(self, document: Document) -> bool:
        """Insert a document, creating its collection on first use."""
        try:
            self.ensure_collection(document)
            inserted = self.insert(document.source_name, [document])
        except Exception:
            logger.exception(
                f"Failed to index document {document.id} in {document.source_name}"
            )
            return False
        return inserted == 1

    def search_index(
        self, source_name: str, query: Sequence[float], top_k: int = 5
    ) -> list[Document]:
        """Return the documents nearest to ``query``, most similar first."""
        try:
            return self.search(
                source_name, [float(value) for value in query], self.effective_top_k(top_k)
            )
        except Exception:
            logger.exception(f"Failed to search {source_name}")
            return []

    def delete_document(self, source_name: str, id: str) -> bool:
        """Delete a document. True only if exactly one document was removed."""
        try:
            deleted = self.delete(source_name, [id])
        except Exception:
            logger.exception(f"Failed to delete document {id} from {source_name}")
            return False
        return deleted == 1

    def update_document(self, document: Document) -> bool:
        """Insert or fully replace a document keyed by (source_name, id)."""
        try:
            self.ensure_collection(document)
            upserted = self.upsert(document.source_name, [document])
        except Exception:
            logger.exception(
                f"Failed to update document {document.id} in {document.source_name}"
            )
            return False
        return upserted == 1

    async def aindex_document(self, document: Document) -> bool:
        return await sync_to_async(self.index_document, thread_sensitive=False)(
            document
        )

    async def asearch_index(
        self, source_name: str, query: Sequence[float], top_k: int = 5
    ) -> list[Document]:
        return await sync_to_async(self.search_index, thread_sensitive=False)(
            source_name, query, top_k
        )

    async def adelete_document(self, source_name: str, id: str) -> bool:
        return await sync_to_async(self.delete_document, thread_sensitive=False)(
            source_name, id
        )

    async def aupdate_document(self, document: Document) -> bool:
        return await sync_to_async(self.update_document, thread_sensitive=False)(
            document
        )

    @abstractmethod
    def has_collection(self, source_name: str) -> bool:
        pass

    @abstractmethod
    def create_collection(self, source_name: str, *, dimensions: int):
        """Create a cosine-similarity collection with a fixed dimensionality."""
        pass

    def load_collection(self, source_name: str):
        """Make a collection ready for reads and writes. No-op by default."""
        pass

    @abstractmethod
    def insert(self, source_name: str, documents: list[Document]) -> int:
        """Insert documents, returning the number of rows inserted."""
        pass

    @abstractmethod
    def search(
        self, source_name: str, query: list[float], top_k: int
    ) -> list[Document]:
        pass

    @abstractmethod
    def delete(self, source_name: str, ids: list[str]) -> int:
        """Delete documents by id, returning the number of rows removed."""
        pass

    @abstractmethod
    def upsert(self, source_name: str, documents: list[Document]) -> int:
        """Insert or replace documents, returning the number of rows affected."""
        pass

    @abstractmethod
    def clear(self, source_name: str):
        """Drop a collection and everything in it."""
        ...
