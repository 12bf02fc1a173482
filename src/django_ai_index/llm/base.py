import logging

from any_llm import AnyLLM

logger = logging.getLogger(__name__)


class LLMService:
    """Embedding client for one any-llm provider and model"""

    def __init__(self, *, client: AnyLLM, model: str):
        self.client = client
        self.model = model

    @classmethod
    def create(cls, *, provider: str, model: str, **kwargs) -> "LLMService":
        return cls(client=AnyLLM.create(provider=provider, **kwargs), model=model)

    @property
    def service_id(self) -> str:
        return f"{self.__class__.__name__}:{self.client.PROVIDER_NAME}:{self.model}"

    def embed(self, text: str, **kwargs) -> list[float] | None:
        """Embed one text. None when the response carries no embedding."""
        logger.debug(f"Requesting embedding from {self.service_id}")
        response = self.client._embedding(model=self.model, inputs=text, **kwargs)
        data = getattr(response, "data", None)
        if not data:
            return None
        return data[0].embedding
