"""Map finished chunks and their email onto search index documents."""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone

from email_rag.chunking.models import Chunk, ChunkingResult
from email_rag.embeddings.base import BaseEmbedder
from email_rag.exceptions import EmbeddingError
from email_rag.index.schema import VECTOR_FIELD
from email_rag.mail.entities import extract_entities
from email_rag.mail.models import EmailRecord

logger = logging.getLogger(__name__)

# Azure AI Search keys allow letters, digits, underscore, dash and equals.
_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9_\-=]")


def document_key(chunk_id: str) -> str:
    return _UNSAFE_KEY_CHARS.sub("_", chunk_id)


def build_search_document(
    chunk: Chunk,
    email: EmailRecord,
    embedding: list[float] | None = None,
    entities: dict[str, list[str]] | None = None,
) -> dict:
    """One index record for ``chunk``; ``content_vector`` only when embedded."""
    if entities is None:
        entities = email.entities or extract_entities(chunk.content)

    document = {
        "id": document_key(chunk.id),
        "content": chunk.content,
        "chunk_id": chunk.id,
        "parent_id": chunk.parent_email_id,
        "chunk_number": chunk.chunk_number,
        "total_chunks": chunk.total_chunks,
        "chunk_type": chunk.chunk_type.value,
        "is_header": chunk.is_header,
        "email_subject": email.subject,
        "sender_name": email.sender.name or email.sender.email,
        "sender_email": email.sender.email,
        "recipients": [a.display() for a in email.to + email.cc if a.display()],
        "sent_date": _iso(email.sent_date),
        "received_date": _iso(email.received_date),
        "has_attachments": bool(email.attachment_names),
        "attachment_names": email.attachment_names,
        "search_relevance": chunk.search_relevance.value if chunk.search_relevance else None,
        "search_weight": chunk.search_weight,
        "content_quality_score": round(chunk.quality_score / 100, 3),
        "token_count": chunk.token_count,
        "word_count": chunk.word_count,
        "is_search_ready": bool(chunk.search_readiness and chunk.search_readiness.is_ready),
        "mentioned_emails": entities.get("emails", []),
        "urls": entities.get("urls", []),
        "processed_at": chunk.processed_at or None,
    }
    if embedding:
        document[VECTOR_FIELD] = embedding
    return document


def assemble_documents(
    result: ChunkingResult,
    email: EmailRecord,
    embedder: BaseEmbedder | None = None,
) -> list[dict]:
    """Documents for every chunk in ``result``, embedded when possible.

    A failed embedding never blocks indexing: the chunk is indexed without a
    vector and a warning is logged.
    """
    if not result.chunks:
        return []
    vectors = _embed_chunks(result.chunks, embedder) if embedder else [None] * len(result.chunks)
    entities = email.entities or None
    return [
        build_search_document(chunk, email, vector, entities)
        for chunk, vector in zip(result.chunks, vectors)
    ]


def _embed_chunks(chunks: list[Chunk], embedder: BaseEmbedder) -> list[list[float] | None]:
    texts = [c.content for c in chunks]
    try:
        return list(embedder.embed_batch(texts))
    except EmbeddingError as e:
        logger.warning(f"Batch embedding failed, retrying per chunk: {e}")

    vectors: list[list[float] | None] = []
    for chunk in chunks:
        try:
            vectors.append(embedder.embed(chunk.content))
        except EmbeddingError as e:
            logger.warning(f"Indexing {chunk.id} without a vector: {e}")
            vectors.append(None)
    return vectors


def _iso(value: datetime | None) -> str | None:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
