"""Keyword, vector, hybrid and semantic search over indexed email chunks."""

from __future__ import annotations

import logging

from email_rag.embeddings.base import BaseEmbedder
from email_rag.exceptions import EmbeddingError
from email_rag.index.base import SEARCH_MODES, BaseSearchIndex, SearchResult

logger = logging.getLogger(__name__)

VECTOR_MODES = ("vector", "hybrid", "semantic")


class EmailSearcher:
    """Embeds queries when a mode needs a vector, then delegates to the index.

    Without an embedder, or when embedding the query fails, hybrid and
    semantic searches run on keywords alone and pure vector search falls back
    to keyword search.
    """

    def __init__(self, index: BaseSearchIndex, embedder: BaseEmbedder | None = None):
        self.index = index
        self.embedder = embedder

    def search(
        self,
        query: str,
        mode: str = "hybrid",
        top: int = 10,
        filter: str | None = None,
    ) -> list[SearchResult]:
        if mode not in SEARCH_MODES:
            raise ValueError(f"Unknown search mode {mode!r}; expected one of {SEARCH_MODES}")
        if not query or not query.strip():
            return []

        vector = self._query_vector(query) if mode in VECTOR_MODES else None
        if mode == "vector" and vector is None:
            logger.warning("No query vector available, falling back to keyword search")
            mode = "keyword"
        elif mode in VECTOR_MODES and vector is None:
            logger.debug(f"Running {mode} search on keywords only")

        return self.index.search(query=query, vector=vector, mode=mode, top=top, filter=filter)

    def search_email(self, query: str, parent_id: str, top: int = 10) -> list[SearchResult]:
        """Search within the chunks of a single email."""
        escaped = parent_id.replace("'", "''")
        return self.search(query, top=top, filter=f"parent_id eq '{escaped}'")

    def _query_vector(self, query: str) -> list[float] | None:
        if self.embedder is None:
            return None
        try:
            return self.embedder.embed_query(query)
        except EmbeddingError as e:
            logger.warning(f"Query embedding failed: {e}")
            return None
