import logging
from abc import ABC, abstractmethod
from numbers import Real
from typing import Any

import requests
from asgiref.sync import sync_to_async

from django_ai_index.llm import LLMService

logger = logging.getLogger(__name__)

HUGGINGFACE_INFERENCE_URL = "https://api-inference.huggingface.co"


class EmbeddingProviderError(RuntimeError):
    """Raised when an embedding provider cannot produce a vector for a text."""


def coerce_embedding(payload: Any) -> list[float]:
    """Turn a decoded provider payload into a list of floats.

    Accepts a flat sequence of numbers, or a nested sequence whose first row is
    one (feature-extraction endpoints return one row per input).
    """
    if not payload:
        raise EmbeddingProviderError("No embedding found in provider response")

    if isinstance(payload, (list, tuple)) and isinstance(payload[0], (list, tuple)):
        payload = payload[0]

    if not isinstance(payload, (list, tuple)) or not payload:
        raise EmbeddingProviderError(
            f"Expected a sequence of numbers, got {type(payload).__name__}"
        )

    embedding = []
    for value in payload:
        # bool is a Real subclass but never a valid vector component
        if isinstance(value, bool) or not isinstance(value, Real):
            raise EmbeddingProviderError(
                f"Embedding contains a non-numeric value: {value!r}"
            )
        embedding.append(float(value))
    return embedding


class EmbeddingProvider(ABC):
    """Base class for embedding providers which turn text into vectors."""

    @property
    def provider_id(self) -> str:
        """Get unique identifier for this provider."""
        return self.__class__.__name__

    @abstractmethod
    def get_embedding(self, text: str) -> list[float]:
        """Embed a string.

        Raises:
            EmbeddingProviderError: if the provider fails or returns no usable vector.
        """
        pass

    async def aget_embedding(self, text: str) -> list[float]:
        return await sync_to_async(self.get_embedding, thread_sensitive=False)(text)


class CoreEmbeddingProvider(EmbeddingProvider):
    """Embedding provider that uses the core embeddings API."""

    def __init__(self, llm_service: LLMService):
        """Initialize with a core LLM Service instance.

        Args:
            llm_service: The LLM service
        """
        self.llm_service = llm_service

    @property
    def provider_id(self) -> str:
        return f"core_{self.llm_service.service_id}"

    def get_embedding(self, text: str) -> list[float]:
        try:
            embedding = self.llm_service.embed(text)
        except Exception as e:
            raise EmbeddingProviderError(f"Embedding request failed: {e}") from e

        if embedding is None:
            raise EmbeddingProviderError("No embedding found in provider response")

        return coerce_embedding(embedding)


class HuggingFaceEmbeddingProvider(EmbeddingProvider):
    """Embedding provider backed by the Hugging Face feature-extraction pipeline."""

    def __init__(
        self,
        *,
        model: str,
        api_token: str,
        base_url: str = HUGGINGFACE_INFERENCE_URL,
        timeout: float | None = 30,
        session: requests.Session | None = None,
    ):
        self.model = model
        self.api_token = api_token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    @property
    def provider_id(self) -> str:
        return f"huggingface_{self.model}"

    @property
    def endpoint(self) -> str:
        return f"/pipeline/feature-extraction/sentence-transformers/{self.model}"

    def get_embedding(self, text: str) -> list[float]:
        try:
            response = self.session.post(
                f"{self.base_url}{self.endpoint}",
                headers={"Authorization": f"Bearer {self.api_token}"},
                json={"inputs": text},
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            raise EmbeddingProviderError(f"Embedding request failed: {e}") from e

        if not response.content:
            raise EmbeddingProviderError("No embedding found in provider response")

        try:
            payload = response.json()
        except ValueError as e:
            raise EmbeddingProviderError(
                f"Could not decode embedding response: {e}"
            ) from e

        return coerce_embedding(payload)
