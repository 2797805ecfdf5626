"""Prefix chunks with subject and sender so each one retrieves on its own."""

from __future__ import annotations

from email_rag.chunking.models import Chunk, SearchRelevance, SectionType
from email_rag.mail.models import EmailRecord

DEFAULT_SEARCH_WEIGHT = 0.5

_SEARCH_WEIGHTS = {
    SearchRelevance.HIGH: 1.0,
    SearchRelevance.MEDIUM: 0.7,
    SearchRelevance.LOW: 0.3,
}


def search_weight_for(relevance: SearchRelevance | str | None) -> float:
    """Index-time weight for a relevance tier. Unknown tiers raise ValueError."""
    if relevance is None:
        return DEFAULT_SEARCH_WEIGHT
    return _SEARCH_WEIGHTS[SearchRelevance(relevance)]


def context_prefix(subject: str, sender_name: str) -> str:
    parts = []
    if subject:
        parts.append(f"Email Subject: {subject}")
    if sender_name:
        parts.append(f"From: {sender_name}")
    return " | ".join(parts)


def optimize_for_search(chunks: list[Chunk], email: EmailRecord) -> list[Chunk]:
    """Add the context prefix and search weight to every non-header chunk, in place."""
    prefix = context_prefix(email.subject, email.sender_display_name)
    for chunk in chunks:
        if chunk.chunk_type == SectionType.HEADER:
            continue
        if prefix:
            chunk.set_content(f"{prefix}\n\n{chunk.content}")
            chunk.has_context = True
        chunk.optimized_for_search = True
        chunk.search_weight = search_weight_for(chunk.search_relevance)
    return chunks
