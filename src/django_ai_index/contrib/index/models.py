import hashlib

from django.db import models

from .storage.pgvector.models import PgVectorDocument, VectorCollection

__all__ = ["EmbeddingCache", "PgVectorDocument", "VectorCollection"]


class EmbeddingCache(models.Model):
    """
    A vector computed for a text by one embedding provider.

    Rows are unique per (content hash, provider id), so the same text embedded
    by two providers is stored once for each of them.
    """

    content_hash = models.CharField(max_length=64, db_index=True)
    embedding_provider_id = models.CharField(max_length=255)

    content = models.TextField()

    embedding_vector = models.JSONField()
    embedding_dimensions = models.IntegerField()

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "django_ai_index_embedding_cache"
        constraints = [
            models.UniqueConstraint(
                fields=["content_hash", "embedding_provider_id"],
                name="unique_embedding_cache",
            ),
        ]
        indexes = [
            models.Index(
                fields=["embedding_provider_id"], name="ai_index_cache_provider_idx"
            ),
            models.Index(fields=["created_at"], name="ai_index_cache_created_idx"),
        ]

    def __str__(self):
        return f"{self.embedding_provider_id}: {self.content_hash[:12]}"

    @staticmethod
    def hash_content(content: str) -> str:
        return hashlib.sha256(content.encode("utf-8")).hexdigest()

    @classmethod
    def lookup(cls, *, content: str, provider_id: str) -> list[float] | None:
        """The cached vector for a text, or None on a miss."""
        return (
            cls.objects.filter(
                content_hash=cls.hash_content(content),
                embedding_provider_id=provider_id,
            )
            .values_list("embedding_vector", flat=True)
            .first()
        )

    @classmethod
    def store(
        cls, *, content: str, provider_id: str, vector: list[float]
    ) -> tuple["EmbeddingCache", bool]:
        """Cache a vector. An existing entry for the same text and provider wins."""
        return cls.objects.get_or_create(
            content_hash=cls.hash_content(content),
            embedding_provider_id=provider_id,
            defaults={
                "content": content,
                "embedding_vector": vector,
                "embedding_dimensions": len(vector),
            },
        )
