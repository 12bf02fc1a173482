from typing import TYPE_CHECKING, Type

from django.db import transaction

from ...schema import Document, document_from_attributes
from ..base import Index

if TYPE_CHECKING:
    from .models import BasePgVectorDocument, VectorCollection


class PgVectorIndex(Index):
    """
    Vector index using PostgreSQL with the pgvector extension.

    Collections are rows of VectorCollection, which records the dimensionality
    fixed by the first document indexed into them.
    """

    def __init__(self, *, model: Type["BasePgVectorDocument"] | None = None, **kwargs):
        """
        Initialize the PgVectorIndex.

        Args:
            model: A Django model class that subclasses BasePgVectorDocument.
        """
        super().__init__(**kwargs)
        if model:
            self.model = model
        else:
            from .models import PgVectorDocument

            self.model = PgVectorDocument

        required_fields = [
            "collection",
            "document_id",
            "source_type",
            "text",
            "attributes",
            "vector",
        ]

        for field in required_fields:
            if not hasattr(self.model, field):
                raise ValueError(
                    f"Model class {self.model.__name__} must include '{field}' field"
                )

    @property
    def collection_model(self) -> Type["VectorCollection"]:
        from .models import VectorCollection

        return VectorCollection

    def has_collection(self, source_name: str) -> bool:
        return self.collection_model.objects.filter(name=source_name).exists()

    def create_collection(self, source_name: str, *, dimensions: int):
        if dimensions <= 0:
            raise ValueError("Collections need at least one dimension")
        self.collection_model.objects.create(name=source_name, dimensions=dimensions)

    def upsert(self, source_name: str, documents: list[Document]) -> int:
        collection = self.collection_model.objects.get(name=source_name)
        for document in documents:
            if document.dimensions != collection.dimensions:
                raise ValueError(
                    f"Document {document.id} has {document.dimensions} dimensions, "
                    f"collection {source_name} expects {collection.dimensions}"
                )

        with transaction.atomic():
            for document in documents:
                self.model.objects.update_or_create(
                    collection=collection,
                    document_id=document.id,
                    defaults={
                        "source_type": document.source_type.value,
                        "text": document.text,
                        "attributes": document.to_attributes(),
                        "vector": list(document.embedding),
                    },
                )
        return len(documents)

    def insert(self, source_name: str, documents: list[Document]) -> int:
        # Ids are unique per collection, so re-inserting an id replaces it
        return self.upsert(source_name, documents)

    def search(
        self, source_name: str, query: list[float], top_k: int
    ) -> list[Document]:
        queryset = (
            self.model.objects.in_collection(source_name)
            .annotate_with_distance(query)
            .order_by("distance")[:top_k]
        )
        return [
            document_from_attributes(instance.attributes, instance.vector)
            for instance in queryset
        ]

    def delete(self, source_name: str, ids: list[str]) -> int:
        deleted, _ = (
            self.model.objects.in_collection(source_name)
            .filter(document_id__in=ids)
            .delete()
        )
        return deleted

    def clear(self, source_name: str):
        self.collection_model.objects.filter(name=source_name).delete()
