import hashlib
import io

import pytest
from django.core.management import call_command

from django_ai_index.contrib.index.embedding import EmbeddingProvider


class HashEmbeddingProvider(EmbeddingProvider):
    """Deterministic embeddings derived from a digest of the text."""

    def __init__(self, dimensions=8):
        self.dimensions = dimensions
        self.calls = []

    @property
    def provider_id(self) -> str:
        return f"hash_{self.dimensions}"

    def get_embedding(self, text: str) -> list[float]:
        self.calls.append(text)
        digest = hashlib.sha256(text.encode("utf-8")).digest()
        return [(byte + 1) / 256 for byte in digest[: self.dimensions]]


@pytest.fixture
def embedding_provider():
    return HashEmbeddingProvider()


@pytest.fixture
def demo_database(tmp_path):
    """A SQLite database with a populated ``customers`` table."""
    path = tmp_path / "demo.sqlite3"
    call_command("create_test_data", path=str(path), stdout=io.StringIO())
    return path
