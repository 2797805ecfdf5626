"""Chunk quality scoring and the search-readiness gate."""

from __future__ import annotations

from email_rag.chunking.models import (
    Chunk,
    QualityReport,
    SearchReadiness,
    SearchRelevance,
    SectionType,
)

TARGET_TOKENS = 384
SCORING_WINDOW = (128, 512)
OPTIMAL_WINDOW = (256, 512)
MIN_EMBEDDING_TOKENS = 32
MAX_EMBEDDING_TOKENS = 512
MIN_CONTENT_CHARS = 10

_RELEVANCE_BONUS = {
    SearchRelevance.HIGH: 5,
    SearchRelevance.MEDIUM: 3,
    SearchRelevance.LOW: 1,
}


def score_chunk(chunk: Chunk) -> float:
    """Additive 0-100 fitness score, rounded to one decimal.

    The token-window term peaks at 30 for a 384-token chunk and drops to 0
    outside [128, 512], so the score jumps at the window edges.
    """
    score = 0.0
    low, high = SCORING_WINDOW
    if low <= chunk.token_count <= high:
        score += (1 - abs(chunk.token_count - TARGET_TOKENS) / TARGET_TOKENS) * 30
    if chunk.content.endswith("."):
        score += 10
    if chunk.word_count > 10:
        score += 10
    if chunk.content.strip():
        score += 20
    if chunk.chunk_type == SectionType.HEADER:
        score += 15
    if chunk.has_context:
        score += 10
    if chunk.search_relevance is not None:
        score += _RELEVANCE_BONUS[SearchRelevance(chunk.search_relevance)]
    return round(min(100.0, max(0.0, score)), 1)


def check_readiness(chunk: Chunk) -> SearchReadiness:
    issues = []
    if chunk.token_count < MIN_EMBEDDING_TOKENS:
        issues.append(f"Token count ({chunk.token_count}) too low for effective embeddings")
    if chunk.token_count > MAX_EMBEDDING_TOKENS:
        issues.append(f"Token count ({chunk.token_count}) exceeds embedding limit")
    if len(chunk.content) < MIN_CONTENT_CHARS:
        issues.append("Content too short for meaningful search")
    if not chunk.content.strip():
        issues.append("Empty or whitespace-only content")

    if not issues:
        return SearchReadiness(is_ready=True, issues=[], readiness_score=100)
    return SearchReadiness(
        is_ready=False,
        issues=issues,
        readiness_score=max(0, 100 - len(issues) * 25),
    )


def build_quality_report(chunks: list[Chunk]) -> QualityReport:
    if not chunks:
        return QualityReport()

    total = len(chunks)
    tokens = [c.token_count for c in chunks]
    ready = sum(1 for c in chunks if c.search_readiness and c.search_readiness.is_ready)
    low, high = OPTIMAL_WINDOW
    optimal = sum(1 for t in tokens if low <= t <= high)

    return QualityReport(
        total_chunks=total,
        average_token_count=round(sum(tokens) / total, 1),
        min_token_count=min(tokens),
        max_token_count=max(tokens),
        average_quality_score=round(sum(c.quality_score for c in chunks) / total, 1),
        search_ready_count=ready,
        search_ready_percentage=round(ready / total * 100, 1),
        optimal_size_percentage=round(optimal / total * 100, 1),
    )
