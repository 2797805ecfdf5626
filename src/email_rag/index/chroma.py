"""ChromaDB backend for indexing chunk documents locally, without a search service."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from email_rag.exceptions import SearchIndexError
from email_rag.index.base import SEARCH_MODES, BaseSearchIndex, IndexingSummary, SearchResult
from email_rag.index.schema import VECTOR_FIELD

logger = logging.getLogger(__name__)

COLLECTION_NAME = "email-chunks"

_EQ_CLAUSE = re.compile(r"^\s*(\w+)\s+eq\s+(?:'((?:[^']|'')*)'|(true|false)|(-?\d+(?:\.\d+)?))\s*$", re.IGNORECASE)
# "and" followed by an even number of quotes, i.e. not inside a string literal
_AND_OUTSIDE_QUOTES = re.compile(r"\s+and\s+(?=(?:[^']*'[^']*')*[^']*$)", re.IGNORECASE)


class ChromaSearchIndex(BaseSearchIndex):
    """Persistent ChromaDB collection of chunk documents.

    Only documents carrying a ``content_vector`` can be stored. Keyword mode
    is a plain substring match; hybrid and semantic fall back to vector search.
    """

    def __init__(self, persist_dir: Path, collection_name: str = COLLECTION_NAME):
        self.persist_dir = Path(persist_dir)
        self.persist_dir.mkdir(parents=True, exist_ok=True)
        try:
            import chromadb
        except ImportError:
            raise ImportError(
                "chromadb is required for ChromaSearchIndex. "
                "Install with: pip install email-rag[chroma]"
            )
        try:
            self.client = chromadb.PersistentClient(path=str(self.persist_dir))
            self.collection = self.client.get_or_create_collection(
                name=collection_name,
                metadata={"hnsw:space": "cosine"},
            )
        except Exception as e:
            raise SearchIndexError(f"Failed to initialize ChromaDB: {e}") from e

    def upload_documents(self, documents: list[dict]) -> IndexingSummary:
        summary = IndexingSummary()
        ids, texts, embeddings, metadatas = [], [], [], []
        for doc in documents:
            vector = doc.get(VECTOR_FIELD)
            if not vector:
                summary.failed += 1
                summary.errors.append(f"{doc.get('id')}: no {VECTOR_FIELD}")
                continue
            ids.append(doc["id"])
            texts.append(doc.get("content", ""))
            embeddings.append(vector)
            metadatas.append(_flatten_metadata(doc))

        if ids:
            try:
                self.collection.upsert(
                    ids=ids, documents=texts, embeddings=embeddings, metadatas=metadatas
                )
            except Exception as e:
                raise SearchIndexError(f"ChromaDB upsert failed: {e}") from e
            summary.succeeded += len(ids)

        if summary.failed:
            logger.warning(f"Skipped {summary.failed} documents without vectors")
        return summary

    def search(
        self,
        query: str | None = None,
        vector: list[float] | None = None,
        mode: str = "hybrid",
        top: int = 10,
        filter: str | None = None,
    ) -> list[SearchResult]:
        if mode not in SEARCH_MODES:
            raise ValueError(f"Unknown search mode {mode!r}; expected one of {SEARCH_MODES}")
        where = parse_filter(filter)

        if mode == "keyword" or not vector:
            if not query:
                raise ValueError("Search needs query text or a query vector")
            return self._keyword_search(query, top, where)

        kwargs: dict = {"query_embeddings": [vector], "n_results": top}
        if where:
            kwargs["where"] = where
        try:
            raw = self.collection.query(**kwargs)
        except Exception as e:
            raise SearchIndexError(f"ChromaDB search failed: {e}") from e

        results: list[SearchResult] = []
        if raw["ids"] and raw["ids"][0]:
            ids = raw["ids"][0]
            distances = raw["distances"][0] if raw.get("distances") else [0.0] * len(ids)
            documents = raw["documents"][0] if raw.get("documents") else [None] * len(ids)
            metadatas = raw["metadatas"][0] if raw.get("metadatas") else [{}] * len(ids)
            for doc_id, dist, doc, meta in zip(ids, distances, documents, metadatas):
                results.append(SearchResult(
                    doc_id=doc_id,
                    score=1.0 - dist,  # cosine distance to similarity
                    text=doc,
                    metadata=meta or {},
                ))
        return results

    def _keyword_search(self, query: str, top: int, where: dict | None) -> list[SearchResult]:
        kwargs: dict = {
            "where_document": {"$contains": query},
            "limit": top,
            "include": ["documents", "metadatas"],
        }
        if where:
            kwargs["where"] = where
        try:
            raw = self.collection.get(**kwargs)
        except Exception as e:
            raise SearchIndexError(f"ChromaDB keyword search failed: {e}") from e
        return [
            SearchResult(doc_id=doc_id, score=1.0, text=doc, metadata=meta or {})
            for doc_id, doc, meta in zip(raw["ids"], raw["documents"], raw["metadatas"])
        ]

    def delete_documents(self, doc_ids: list[str]) -> None:
        if doc_ids:
            self.collection.delete(ids=doc_ids)

    def count(self) -> int:
        return self.collection.count()


def parse_filter(expression: str | None) -> dict | None:
    """Translate ``field eq 'value' and ...`` OData filters into a Chroma ``where``."""
    if not expression:
        return None
    clauses = []
    for part in _AND_OUTSIDE_QUOTES.split(expression.strip()):
        match = _EQ_CLAUSE.match(part)
        if not match:
            raise SearchIndexError(f"Unsupported filter for ChromaDB: {part!r}")
        field, text, boolean, number = match.groups()
        if text is not None:
            value = text.replace("''", "'")
        elif boolean is not None:
            value = boolean.lower() == "true"
        else:
            value = float(number) if "." in number else int(number)
        clauses.append({field: value})
    return clauses[0] if len(clauses) == 1 else {"$and": clauses}


def _flatten_metadata(doc: dict) -> dict:
    """Chroma metadata holds scalars only: lists are joined, None dropped."""
    metadata = {}
    for key, value in doc.items():
        if key in ("id", "content", VECTOR_FIELD) or value is None:
            continue
        if isinstance(value, list):
            value = ", ".join(str(v) for v in value)
        metadata[key] = value
    return metadata
