"""OpenAI and Azure OpenAI embedding backends over HTTP."""

from __future__ import annotations

import logging
import time

import httpx

from email_rag.embeddings.base import BaseEmbedder
from email_rag.exceptions import EmbeddingError

logger = logging.getLogger(__name__)

MAX_RETRIES = 3
BATCH_SIZE = 100
RETRYABLE_STATUS = {429, 500, 502, 503, 504}


class OpenAIEmbedder(BaseEmbedder):
    """OpenAI embeddings API with retry on rate limits and transient errors."""

    def __init__(
        self,
        api_key: str,
        model: str = "text-embedding-3-small",
        dimensions: int | None = None,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ):
        if not api_key:
            raise EmbeddingError(
                "OpenAI API key is required. "
                "Pass it directly or set OPENAI_API_KEY in your environment."
            )
        self.api_key = api_key
        self.model = model
        self.dimensions = dimensions
        self.timeout = timeout
        self._transport = transport

    def _url(self) -> str:
        return "https://api.openai.com/v1/embeddings"

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def _payload(self, texts: list[str]) -> dict:
        payload: dict = {"input": texts, "model": self.model}
        if self.dimensions:
            payload["dimensions"] = self.dimensions
        return payload

    def _call_api(self, texts: list[str]) -> list[list[float]]:
        """POST one batch, backing off exponentially on retryable statuses."""
        for attempt in range(MAX_RETRIES):
            try:
                with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                    response = client.post(
                        self._url(), json=self._payload(texts), headers=self._headers()
                    )
                    response.raise_for_status()
                    data = response.json()
                # Results may come back out of order
                ordered = sorted(data["data"], key=lambda item: item["index"])
                return [item["embedding"] for item in ordered]
            except httpx.HTTPStatusError as e:
                status = e.response.status_code
                if status not in RETRYABLE_STATUS:
                    raise EmbeddingError(f"Embedding request failed ({status}): {e}") from e
                wait = 2 ** (attempt + 1)
                logger.warning(f"Embedding API returned {status}, retrying in {wait}s (attempt {attempt + 1})")
                time.sleep(wait)
            except httpx.TimeoutException:
                wait = 2 ** attempt
                logger.warning(f"Embedding API timeout, retrying in {wait}s (attempt {attempt + 1})")
                time.sleep(wait)
            except (httpx.HTTPError, KeyError, ValueError) as e:
                raise EmbeddingError(f"Embedding request failed: {e}") from e
        raise EmbeddingError(f"Embedding request failed after {MAX_RETRIES} retries")

    def embed(self, text: str) -> list[float]:
        return self._call_api([text])[0]

    def embed_query(self, text: str) -> list[float]:
        return self._call_api([text])[0]

    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        all_embeddings: list[list[float]] = []
        for i in range(0, len(texts), BATCH_SIZE):
            all_embeddings.extend(self._call_api(texts[i : i + BATCH_SIZE]))
        return all_embeddings


class AzureOpenAIEmbedder(OpenAIEmbedder):
    """Embeddings from an Azure OpenAI deployment."""

    def __init__(
        self,
        endpoint: str,
        api_key: str,
        deployment: str,
        api_version: str = "2024-02-01",
        dimensions: int | None = None,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ):
        if not endpoint or not deployment:
            raise EmbeddingError(
                "Azure OpenAI endpoint and deployment are required. "
                "Set AZURE_OPENAI_ENDPOINT and AZURE_OPENAI_DEPLOYMENT."
            )
        super().__init__(
            api_key=api_key,
            model=deployment,
            dimensions=dimensions,
            timeout=timeout,
            transport=transport,
        )
        self.endpoint = endpoint.rstrip("/")
        self.deployment = deployment
        self.api_version = api_version

    def _url(self) -> str:
        return (
            f"{self.endpoint}/openai/deployments/{self.deployment}/embeddings"
            f"?api-version={self.api_version}"
        )

    def _headers(self) -> dict[str, str]:
        return {"api-key": self.api_key, "Content-Type": "application/json"}

    def _payload(self, texts: list[str]) -> dict:
        payload: dict = {"input": texts}
        if self.dimensions:
            payload["dimensions"] = self.dimensions
        return payload
