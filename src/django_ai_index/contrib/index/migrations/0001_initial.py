import django.db.models.deletion
import pgvector.django
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        pgvector.django.VectorExtension(),
        migrations.CreateModel(
            name="EmbeddingCache",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("content_hash", models.CharField(db_index=True, max_length=64)),
                ("embedding_provider_id", models.CharField(max_length=255)),
                ("content", models.TextField()),
                ("embedding_vector", models.JSONField()),
                ("embedding_dimensions", models.IntegerField()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "db_table": "django_ai_index_embedding_cache",
                "indexes": [
                    models.Index(
                        fields=["embedding_provider_id"],
                        name="ai_index_cache_provider_idx",
                    ),
                    models.Index(
                        fields=["created_at"], name="ai_index_cache_created_idx"
                    ),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("content_hash", "embedding_provider_id"),
                        name="unique_embedding_cache",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="VectorCollection",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("name", models.CharField(max_length=255, unique=True)),
                ("dimensions", models.PositiveIntegerField()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "db_table": "django_ai_index_vector_collection",
            },
        ),
        migrations.CreateModel(
            name="PgVectorDocument",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("document_id", models.CharField(max_length=255)),
                ("source_type", models.CharField(max_length=16)),
                ("text", models.TextField()),
                ("attributes", models.JSONField(default=dict)),
                ("vector", pgvector.django.VectorField()),
                (
                    "collection",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="+",
                        to="django_ai_index_index.vectorcollection",
                    ),
                ),
            ],
            options={
                "db_table": "django_ai_index_pgvector_document",
                "abstract": False,
                "unique_together": {("collection", "document_id")},
            },
        ),
    ]
