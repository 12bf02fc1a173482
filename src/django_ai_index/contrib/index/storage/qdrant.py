import logging
import uuid

from qdrant_client import QdrantClient
from qdrant_client.http import models as qdrant_models
from qdrant_client.models import Distance

from ..schema import Document, document_from_attributes
from .base import Index

logger = logging.getLogger(__name__)

# Namespace for deriving Qdrant point ids from (source_name, document id)
POINT_ID_NAMESPACE = uuid.UUID("6f1c8e62-3b0a-4c5e-9a57-2f1f4b8d0c11")

# Cosine collections store normalized vectors, so the original is kept in the payload
EMBEDDING_PAYLOAD_KEY = "embedding"


def point_id(source_name: str, document_id: str) -> str:
    """Qdrant only accepts UUIDs or integers as point ids."""
    return str(uuid.uuid5(POINT_ID_NAMESPACE, f"{source_name}:{document_id}"))


class QdrantIndex(Index):
    """Vector index using Qdrant. Each source name maps to one collection."""

    def __init__(
        self,
        *,
        client: QdrantClient | None = None,
        api_key: str | None = None,
        **kwargs,
    ):
        super().__init__(**kwargs)
        if client is None:
            location = self.config.connection_string if self.config else ":memory:"
            client = QdrantClient(location=location or ":memory:", api_key=api_key)
        self.client = client

    def has_collection(self, source_name: str) -> bool:
        return self.client.collection_exists(source_name)

    def create_collection(self, source_name: str, *, dimensions: int):
        self.client.create_collection(
            collection_name=source_name,
            vectors_config=qdrant_models.VectorParams(
                size=dimensions, distance=Distance.COSINE
            ),
        )

    def get_dimensions(self, source_name: str) -> int:
        info = self.client.get_collection(collection_name=source_name)
        return info.config.params.vectors.size

    def _points(
        self, source_name: str, documents: list[Document]
    ) -> list[qdrant_models.PointStruct]:
        dimensions = self.get_dimensions(source_name)
        points = []
        for document in documents:
            if document.dimensions != dimensions:
                raise ValueError(
                    f"Document {document.id} has {document.dimensions} dimensions, "
                    f"collection {source_name} expects {dimensions}"
                )
            points.append(
                qdrant_models.PointStruct(
                    id=point_id(source_name, document.id),
                    vector=list(document.embedding),
                    payload={
                        **document.to_attributes(),
                        EMBEDDING_PAYLOAD_KEY: list(document.embedding),
                    },
                )
            )
        return points

    def _write(self, source_name: str, documents: list[Document]) -> int:
        response = self.client.upsert(
            collection_name=source_name,
            points=self._points(source_name, documents),
            wait=True,
        )
        if response.status != qdrant_models.UpdateStatus.COMPLETED:
            logger.warning(f"Qdrant write to {source_name} ended as {response.status}")
            return 0
        return len(documents)

    def insert(self, source_name: str, documents: list[Document]) -> int:
        return self._write(source_name, documents)

    def upsert(self, source_name: str, documents: list[Document]) -> int:
        return self._write(source_name, documents)

    def search(
        self, source_name: str, query: list[float], top_k: int
    ) -> list[Document]:
        response = self.client.query_points(
            collection_name=source_name,
            query=query,
            limit=top_k,
            with_payload=True,
            with_vectors=False,
        )
        documents = []
        for point in response.points:
            attributes = dict(point.payload)
            embedding = attributes.pop(EMBEDDING_PAYLOAD_KEY)
            documents.append(document_from_attributes(attributes, embedding))
        return documents

    def delete(self, source_name: str, ids: list[str]) -> int:
        point_ids = [point_id(source_name, id) for id in ids]
        existing = self.client.retrieve(
            collection_name=source_name,
            ids=point_ids,
            with_payload=False,
            with_vectors=False,
        )
        if not existing:
            return 0

        self.client.delete(
            collection_name=source_name,
            points_selector=qdrant_models.PointIdsList(
                points=[record.id for record in existing]
            ),
            wait=True,
        )
        return len(existing)

    def clear(self, source_name: str):
        self.client.delete_collection(collection_name=source_name)
