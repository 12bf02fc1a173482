from typing import Self, Sequence

from django.db import models
from pgvector.django import CosineDistance, VectorField


class VectorCollection(models.Model):
    """A named collection of documents with a fixed embedding dimensionality."""

    name = models.CharField(max_length=255, unique=True)
    dimensions = models.PositiveIntegerField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "django_ai_index_vector_collection"

    def __str__(self):
        return self.name


class PgVectorDocumentQuerySet(models.QuerySet["BasePgVectorDocument"]):
    def in_collection(self, name: str) -> Self:
        return self.filter(collection__name=name)

    def annotate_with_distance(
        self,
        query_vector: Sequence[float],
    ) -> Self:
        kwargs = {"distance": CosineDistance("vector", query_vector)}
        return self.annotate(**kwargs)


class PgVectorDocumentManager(models.Manager.from_queryset(PgVectorDocumentQuerySet)):
    pass


class BasePgVectorDocument(models.Model):
    """
    Django model to be used with PgVectorIndex.

    ``attributes`` holds the document's serialized fields, including the
    ``sourceType`` discriminant used to rebuild it.
    """

    collection = models.ForeignKey(
        VectorCollection, on_delete=models.CASCADE, related_name="+"
    )
    document_id = models.CharField(max_length=255)
    source_type = models.CharField(max_length=16)
    text = models.TextField()
    attributes = models.JSONField(default=dict)

    objects = PgVectorDocumentManager()

    class Meta:
        abstract = True
        unique_together = [("collection", "document_id")]

    def __str__(self):
        return self.document_id


class PgVectorDocument(BasePgVectorDocument):
    vector = VectorField()

    class Meta(BasePgVectorDocument.Meta):
        db_table = "django_ai_index_pgvector_document"
