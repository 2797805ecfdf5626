"""Azure AI Search backend using the REST API."""

from __future__ import annotations

import logging
import time

import httpx

from email_rag.config import Settings
from email_rag.exceptions import SearchIndexError
from email_rag.index.base import SEARCH_MODES, BaseSearchIndex, IndexingSummary, SearchResult
from email_rag.index.schema import (
    SCORING_PROFILE,
    SEMANTIC_CONFIGURATION,
    VECTOR_FIELD,
    build_index_definition,
)

logger = logging.getLogger(__name__)

MAX_RETRIES = 3
UPLOAD_BATCH_SIZE = 100
RETRYABLE_STATUS = {429, 503}


class AzureSearchIndex(BaseSearchIndex):
    """One Azure AI Search index holding email chunk documents."""

    def __init__(
        self,
        endpoint: str,
        index_name: str,
        api_key: str,
        api_version: str = "2024-07-01",
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ):
        if not endpoint or not api_key:
            raise SearchIndexError(
                "Azure AI Search endpoint and API key are required. "
                "Set AZURE_SEARCH_ENDPOINT and AZURE_SEARCH_API_KEY in your environment."
            )
        self.endpoint = endpoint.rstrip("/")
        self.index_name = index_name
        self.api_key = api_key
        self.api_version = api_version
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> "AzureSearchIndex":
        return cls(
            endpoint=settings.search_endpoint,
            index_name=settings.search_index,
            api_key=settings.search_api_key,
            api_version=settings.search_api_version,
        )

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------

    def _request(self, method: str, path: str, json: dict | None = None) -> httpx.Response:
        url = f"{self.endpoint}{path}"
        params = {"api-version": self.api_version}
        headers = {"api-key": self.api_key, "Content-Type": "application/json"}

        for attempt in range(MAX_RETRIES):
            try:
                with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                    response = client.request(method, url, params=params, headers=headers, json=json)
            except httpx.HTTPError as e:
                raise SearchIndexError(f"{method} {path} failed: {e}") from e

            if response.status_code in RETRYABLE_STATUS:
                wait = 2 ** (attempt + 1)
                logger.warning(
                    f"Search service returned {response.status_code}, "
                    f"retrying in {wait}s (attempt {attempt + 1})"
                )
                time.sleep(wait)
                continue
            return response

        raise SearchIndexError(f"{method} {path} failed after {MAX_RETRIES} retries")

    def _check(self, response: httpx.Response, action: str) -> None:
        if response.is_error:
            raise SearchIndexError(
                f"{action} failed ({response.status_code}): {response.text[:500]}"
            )

    # ------------------------------------------------------------------
    # Index management
    # ------------------------------------------------------------------

    def exists(self) -> bool:
        response = self._request("GET", f"/indexes/{self.index_name}")
        if response.status_code == 404:
            return False
        self._check(response, "Index lookup")
        return True

    def ensure_index(self, vector_dimensions: int = 1536) -> None:
        """Create the index, or update it in place when it already exists."""
        definition = build_index_definition(self.index_name, vector_dimensions)
        response = self._request("PUT", f"/indexes/{self.index_name}", json=definition)
        self._check(response, f"Create or update index {self.index_name}")
        logger.info(f"Index {self.index_name} is ready")

    # ------------------------------------------------------------------
    # Documents
    # ------------------------------------------------------------------

    def upload_documents(self, documents: list[dict]) -> IndexingSummary:
        summary = IndexingSummary()
        for i in range(0, len(documents), UPLOAD_BATCH_SIZE):
            batch = documents[i : i + UPLOAD_BATCH_SIZE]
            body = {"value": [{"@search.action": "mergeOrUpload", **doc} for doc in batch]}
            response = self._request("POST", f"/indexes/{self.index_name}/docs/index", json=body)
            # 207 means some documents failed; the body says which.
            if response.status_code not in (200, 207):
                self._check(response, "Document upload")
            summary.merge(_summarize_upload(response.json()))

        if summary.failed:
            logger.warning(f"{summary.failed} of {len(documents)} documents failed to index")
        return summary

    def delete_documents(self, doc_ids: list[str]) -> None:
        if not doc_ids:
            return
        for i in range(0, len(doc_ids), UPLOAD_BATCH_SIZE):
            body = {
                "value": [
                    {"@search.action": "delete", "id": doc_id}
                    for doc_id in doc_ids[i : i + UPLOAD_BATCH_SIZE]
                ]
            }
            response = self._request("POST", f"/indexes/{self.index_name}/docs/index", json=body)
            if response.status_code not in (200, 207):
                self._check(response, "Document delete")

    def count(self) -> int:
        response = self._request("GET", f"/indexes/{self.index_name}/docs/$count")
        self._check(response, "Document count")
        try:
            return int(response.text.strip().lstrip("\ufeff"))
        except ValueError as e:
            raise SearchIndexError(f"Unexpected count response: {response.text[:100]}") from e

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def search(
        self,
        query: str | None = None,
        vector: list[float] | None = None,
        mode: str = "hybrid",
        top: int = 10,
        filter: str | None = None,
        scoring_profile: str | None = SCORING_PROFILE,
    ) -> list[SearchResult]:
        body = build_search_body(query, vector, mode, top, filter, scoring_profile)
        response = self._request("POST", f"/indexes/{self.index_name}/docs/search", json=body)
        self._check(response, "Search")

        results: list[SearchResult] = []
        for hit in response.json().get("value", []):
            metadata = {k: v for k, v in hit.items() if not k.startswith("@search.") and k != "content"}
            results.append(SearchResult(
                doc_id=str(hit.get("id", "")),
                score=hit.get("@search.score", 0.0),
                text=hit.get("content"),
                metadata=metadata,
                reranker_score=hit.get("@search.rerankerScore"),
            ))
        return results


def build_search_body(
    query: str | None,
    vector: list[float] | None,
    mode: str,
    top: int = 10,
    filter: str | None = None,
    scoring_profile: str | None = SCORING_PROFILE,
) -> dict:
    """Request body for ``docs/search`` in the given mode."""
    if mode not in SEARCH_MODES:
        raise ValueError(f"Unknown search mode {mode!r}; expected one of {SEARCH_MODES}")
    if mode == "vector" and not vector:
        raise ValueError("Vector search needs a query vector")
    if mode != "vector" and not query:
        raise ValueError(f"{mode} search needs query text")

    body: dict = {"top": top, "count": True}
    if mode != "vector":
        body["search"] = query
        if scoring_profile:
            body["scoringProfile"] = scoring_profile
    if vector and mode != "keyword":
        body["vectorQueries"] = [{
            "kind": "vector",
            "vector": vector,
            "fields": VECTOR_FIELD,
            "k": top,
        }]
    if mode == "semantic":
        body["queryType"] = "semantic"
        body["semanticConfiguration"] = SEMANTIC_CONFIGURATION
    if filter:
        body["filter"] = filter
    return body


def _summarize_upload(payload: dict) -> IndexingSummary:
    summary = IndexingSummary()
    for item in payload.get("value", []):
        if item.get("status"):
            summary.succeeded += 1
        else:
            summary.failed += 1
            summary.errors.append(f"{item.get('key')}: {item.get('errorMessage') or item.get('statusCode')}")
    return summary
