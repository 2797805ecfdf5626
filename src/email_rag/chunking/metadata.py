"""Assign ids, ordering, linkage and scores to an email's final chunk list."""

from __future__ import annotations

from email_rag.chunking.models import Chunk, ChunkingContext
from email_rag.chunking.quality import check_readiness, score_chunk


def chunk_id(email_id: str, position: int) -> str:
    """Id of the chunk at 1-based ``position``."""
    return f"{email_id}_chunk_{position}"


def assign_metadata(chunks: list[Chunk], context: ChunkingContext) -> list[Chunk]:
    """Number, link and score ``chunks`` in place; their order is final.

    Scoring runs here rather than earlier because it reads fields
    (``has_context``) that search optimisation sets.
    """
    total = len(chunks)
    for index, chunk in enumerate(chunks):
        chunk.id = chunk_id(context.email_id, index + 1)
        chunk.chunk_number = index + 1
        chunk.total_chunks = total
        chunk.is_first = index == 0
        chunk.is_last = index == total - 1
        chunk.previous_chunk_id = chunks[index - 1].id if index > 0 else None
        chunk.next_chunk_id = chunk_id(context.email_id, index + 2) if index < total - 1 else None
        chunk.parent_email_id = context.email_id
        chunk.email_subject = context.subject
        chunk.sender_name = context.sender_name
        chunk.processed_at = context.processed_at

        chunk.quality_score = score_chunk(chunk)
        chunk.search_readiness = check_readiness(chunk)
    return chunks
