"""Interface the chunk indexer and the searcher expect from an embedding backend."""

from __future__ import annotations

from abc import ABC, abstractmethod


class BaseEmbedder(ABC):
    """Turns email chunk text and search queries into vectors of one size.

    ``dimensions`` must match the ``content_vector`` field of the search index
    the vectors are written to; None means the model's native size.
    """

    dimensions: int | None = None

    @abstractmethod
    def embed(self, text: str) -> list[float]:
        """Vector for one chunk's content, context prefix included."""
        ...

    @abstractmethod
    def embed_query(self, text: str) -> list[float]:
        """Vector for a search query, comparable with chunk vectors."""
        ...

    @abstractmethod
    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """One vector per chunk text, in input order.

        A failure raises ``EmbeddingError`` for the whole batch; callers fall
        back to ``embed`` per chunk.
        """
        ...
