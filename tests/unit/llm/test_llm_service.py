from unittest import mock

import pytest
from any_llm import AnyLLM

from django_ai_index.llm import LLMService


class MockAnyLLM(mock.Mock):
    def __init__(self, **kwargs):
        super().__init__(spec=AnyLLM, **kwargs)
        self.PROVIDER_NAME = "mock-provider"


@pytest.fixture
def mock_any_llm():
    return MockAnyLLM()


def test_llm_service_embed_wraps_anyllm(mock_any_llm):
    text = "SELECT * FROM customers"
    mock_any_llm._embedding.return_value = mock.Mock(
        data=[mock.Mock(embedding=[0.4, 0.5, 0.6])]
    )
    service = LLMService(client=mock_any_llm, model="mock-model")
    assert service.embed(text) == [0.4, 0.5, 0.6]
    mock_any_llm._embedding.assert_called_once_with(model="mock-model", inputs=text)


def test_llm_service_embed_without_data(mock_any_llm):
    mock_any_llm._embedding.return_value = mock.Mock(data=[])
    service = LLMService(client=mock_any_llm, model="mock-model")
    assert service.embed("hello") is None


def test_llm_service_id(mock_any_llm):
    service = LLMService(client=mock_any_llm, model="mock-model")
    assert service.service_id == "LLMService:mock-provider:mock-model"


def test_llm_service_create_uses_anyllm_factory(mock_any_llm):
    with mock.patch.object(AnyLLM, "create", return_value=mock_any_llm) as create:
        service = LLMService.create(provider="openai", model="text-embedding-3-small")

    create.assert_called_once_with(provider="openai")
    assert service.client is mock_any_llm
    assert service.model == "text-embedding-3-small"
