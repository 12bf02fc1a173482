from dataclasses import dataclass, field

from ..schema import Document
from .base import Index


@dataclass
class InMemoryCollection:
    dimensions: int
    documents: dict[str, Document] = field(default_factory=dict)

    def check_dimensions(self, document: Document):
        if document.dimensions != self.dimensions:
            raise ValueError(
                f"Document {document.id} has {document.dimensions} dimensions, "
                f"collection expects {self.dimensions}"
            )


class InMemoryIndex(Index):
    """Simple in-memory index for testing."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.collections: dict[str, InMemoryCollection] = {}

    def has_collection(self, source_name: str) -> bool:
        return source_name in self.collections

    def create_collection(self, source_name: str, *, dimensions: int):
        if dimensions <= 0:
            raise ValueError("Collections need at least one dimension")
        self.collections[source_name] = InMemoryCollection(dimensions=dimensions)

    def insert(self, source_name: str, documents: list[Document]) -> int:
        # Ids are unique per collection, so re-inserting an id replaces it
        return self.upsert(source_name, documents)

    def upsert(self, source_name: str, documents: list[Document]) -> int:
        collection = self.collections[source_name]
        for document in documents:
            collection.check_dimensions(document)
        for document in documents:
            collection.documents[document.id] = document
        return len(documents)

    def search(
        self, source_name: str, query: list[float], top_k: int
    ) -> list[Document]:
        import numpy as np

        collection = self.collections[source_name]
        if len(query) != collection.dimensions:
            raise ValueError(
                f"Query has {len(query)} dimensions, "
                f"collection expects {collection.dimensions}"
            )

        query_norm = np.linalg.norm(query)
        similarities = []
        for document in collection.documents.values():
            denominator = query_norm * np.linalg.norm(document.embedding)
            if denominator == 0:
                cosine_similarity = 0.0
            else:
                cosine_similarity = np.dot(query, document.embedding) / denominator
            similarities.append((cosine_similarity, document))

        sorted_similarities = sorted(
            similarities, key=lambda pair: pair[0], reverse=True
        )
        return [document for _, document in sorted_similarities[:top_k]]

    def delete(self, source_name: str, ids: list[str]) -> int:
        collection = self.collections[source_name]
        deleted = 0
        for id in ids:
            if collection.documents.pop(id, None) is not None:
                deleted += 1
        return deleted

    def clear(self, source_name: str):
        self.collections.pop(source_name, None)
