"""Tests for the OpenAI and Azure OpenAI embedders."""

import json

import httpx
import pytest

from email_rag.embeddings import openai as openai_module
from email_rag.embeddings.openai import AzureOpenAIEmbedder, OpenAIEmbedder
from email_rag.exceptions import EmbeddingError


def _embedding_response(request: httpx.Request) -> httpx.Response:
    texts = json.loads(request.content)["input"]
    # Reverse order to check results are re-sorted by index
    data = [
        {"index": i, "embedding": [float(i), float(len(text))]}
        for i, text in reversed(list(enumerate(texts)))
    ]
    return httpx.Response(200, json={"data": data})


@pytest.fixture
def no_sleep(monkeypatch):
    sleeps = []
    monkeypatch.setattr(openai_module.time, "sleep", sleeps.append)
    return sleeps


def test_init_requires_api_key():
    with pytest.raises(EmbeddingError, match="API key is required"):
        OpenAIEmbedder(api_key="")


def test_embed_batch_preserves_order():
    requests = []

    def handler(request):
        requests.append(request)
        return _embedding_response(request)

    embedder = OpenAIEmbedder(
        api_key="sk-test", dimensions=256, transport=httpx.MockTransport(handler)
    )
    vectors = embedder.embed_batch(["a", "bb", "ccc"])

    assert vectors == [[0.0, 1.0], [1.0, 2.0], [2.0, 3.0]]
    request = requests[0]
    assert str(request.url) == "https://api.openai.com/v1/embeddings"
    assert request.headers["Authorization"] == "Bearer sk-test"
    assert json.loads(request.content) == {
        "input": ["a", "bb", "ccc"],
        "model": "text-embedding-3-small",
        "dimensions": 256,
    }


def test_embed_batch_splits_large_inputs(monkeypatch):
    calls = []

    def handler(request):
        calls.append(len(json.loads(request.content)["input"]))
        return _embedding_response(request)

    monkeypatch.setattr(openai_module, "BATCH_SIZE", 2)
    embedder = OpenAIEmbedder(api_key="sk-test", transport=httpx.MockTransport(handler))
    assert len(embedder.embed_batch(["a", "b", "c", "d", "e"])) == 5
    assert calls == [2, 2, 1]


def test_client_error_is_not_retried(no_sleep):
    transport = httpx.MockTransport(lambda request: httpx.Response(400, json={"error": "bad"}))
    embedder = OpenAIEmbedder(api_key="sk-test", transport=transport)
    with pytest.raises(EmbeddingError, match="400"):
        embedder.embed("hello")
    assert no_sleep == []


def test_rate_limit_is_retried(no_sleep):
    responses = iter([httpx.Response(429), None])

    def handler(request):
        response = next(responses)
        return response if response is not None else _embedding_response(request)

    embedder = OpenAIEmbedder(api_key="sk-test", transport=httpx.MockTransport(handler))
    assert embedder.embed_query("hello") == [0.0, 5.0]
    assert no_sleep == [2]


def test_gives_up_after_retries(no_sleep):
    transport = httpx.MockTransport(lambda request: httpx.Response(503))
    embedder = OpenAIEmbedder(api_key="sk-test", transport=transport)
    with pytest.raises(EmbeddingError, match="after 3 retries"):
        embedder.embed("hello")
    assert no_sleep == [2, 4, 8]


def test_malformed_response():
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"nope": []}))
    embedder = OpenAIEmbedder(api_key="sk-test", transport=transport)
    with pytest.raises(EmbeddingError):
        embedder.embed("hello")


def test_azure_requires_deployment():
    with pytest.raises(EmbeddingError, match="deployment"):
        AzureOpenAIEmbedder(endpoint="https://x.openai.azure.com", api_key="k", deployment="")


def test_azure_request_shape():
    requests = []

    def handler(request):
        requests.append(request)
        return _embedding_response(request)

    embedder = AzureOpenAIEmbedder(
        endpoint="https://demo.openai.azure.com/",
        api_key="azure-key",
        deployment="embed-small",
        transport=httpx.MockTransport(handler),
    )
    assert embedder.embed("hi") == [0.0, 2.0]

    request = requests[0]
    assert request.url.path == "/openai/deployments/embed-small/embeddings"
    assert request.url.params["api-version"] == "2024-02-01"
    assert request.headers["api-key"] == "azure-key"
    assert "Authorization" not in request.headers
    assert json.loads(request.content) == {"input": ["hi"]}
