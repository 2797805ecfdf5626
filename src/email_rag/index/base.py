"""Abstract base class for search index backends."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

SEARCH_MODES = ("keyword", "vector", "hybrid", "semantic")


@dataclass
class SearchResult:
    """A single hit from a search index query."""

    doc_id: str
    score: float
    text: str | None
    metadata: dict
    reranker_score: float | None = None


@dataclass
class IndexingSummary:
    """Outcome of an upload: per-document failures do not abort the batch."""

    succeeded: int = 0
    failed: int = 0
    errors: list[str] = field(default_factory=list)

    def merge(self, other: "IndexingSummary") -> None:
        self.succeeded += other.succeeded
        self.failed += other.failed
        self.errors.extend(other.errors)


class BaseSearchIndex(ABC):
    """Abstract interface for indexing chunk documents and querying them."""

    @abstractmethod
    def upload_documents(self, documents: list[dict]) -> IndexingSummary:
        """Upsert documents built by ``build_search_document``."""
        ...

    @abstractmethod
    def search(
        self,
        query: str | None = None,
        vector: list[float] | None = None,
        mode: str = "hybrid",
        top: int = 10,
        filter: str | None = None,
    ) -> list[SearchResult]:
        """Ranked results for a text query, a query vector, or both."""
        ...

    @abstractmethod
    def delete_documents(self, doc_ids: list[str]) -> None:
        """Remove documents by key."""
        ...

    @abstractmethod
    def count(self) -> int:
        """Total number of documents in the index."""
        ...
