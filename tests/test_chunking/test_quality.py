"""Tests for quality scoring, readiness and the aggregate report."""

import pytest

from email_rag.chunking.models import Chunk, SearchReadiness, SearchRelevance, SectionType
from email_rag.chunking.quality import build_quality_report, check_readiness, score_chunk


def _chunk(content="Some content.", token_count=100, word_count=50, **kwargs):
    return Chunk(
        chunk_type=kwargs.pop("chunk_type", SectionType.BODY),
        content=content,
        token_count=token_count,
        word_count=word_count,
        **kwargs,
    )


def test_score_at_target():
    chunk = _chunk(token_count=384, word_count=300, has_context=True,
                   search_relevance=SearchRelevance.HIGH)
    # 30 window + 10 period + 10 words + 20 non-blank + 10 context + 5 relevance
    assert score_chunk(chunk) == 85.0


def test_score_header():
    chunk = _chunk(content="Subject: Hi", token_count=10, word_count=2,
                   chunk_type=SectionType.HEADER, search_relevance=SearchRelevance.HIGH)
    assert score_chunk(chunk) == 40.0


def test_window_edges_are_discontinuous():
    assert score_chunk(_chunk(content="abc", token_count=128, word_count=1)) == 30.0
    assert score_chunk(_chunk(content="abc", token_count=127, word_count=1)) == 20.0
    assert score_chunk(_chunk(content="abc", token_count=513, word_count=1)) == 20.0


def test_relevance_bonus():
    base = score_chunk(_chunk(content="abc", token_count=10, word_count=1))
    medium = score_chunk(_chunk(content="abc", token_count=10, word_count=1,
                                search_relevance=SearchRelevance.MEDIUM))
    low = score_chunk(_chunk(content="abc", token_count=10, word_count=1,
                             search_relevance=SearchRelevance.LOW))
    assert medium - base == pytest.approx(3)
    assert low - base == pytest.approx(1)


def test_score_bounds():
    assert score_chunk(_chunk(content="   ", token_count=0, word_count=0)) == 0.0
    best = _chunk(content=("word " * 300).strip() + ".", token_count=384, word_count=301,
                  chunk_type=SectionType.HEADER, has_context=True,
                  search_relevance=SearchRelevance.HIGH)
    assert 0 <= score_chunk(best) <= 100


def test_ready_chunk():
    readiness = check_readiness(_chunk(content="A reasonably long piece of content."))
    assert readiness == SearchReadiness(is_ready=True, issues=[], readiness_score=100)


def test_low_tokens_and_short_content():
    readiness = check_readiness(_chunk(content="Hi", token_count=10))
    assert readiness.is_ready is False
    assert len(readiness.issues) == 2
    assert "too low for effective embeddings" in readiness.issues[0]
    assert readiness.readiness_score == 50


def test_whitespace_only():
    readiness = check_readiness(_chunk(content="   ", token_count=0))
    assert len(readiness.issues) == 3
    assert readiness.issues[-1] == "Empty or whitespace-only content"
    assert readiness.readiness_score == 25


def test_exceeds_limit():
    readiness = check_readiness(_chunk(content="x" * 100, token_count=600))
    assert readiness.issues == ["Token count (600) exceeds embedding limit"]
    assert readiness.readiness_score == 75


def test_empty_report():
    report = build_quality_report([])
    assert report.total_chunks == 0
    assert report.search_ready_percentage == 0.0


def test_report_aggregates():
    chunks = [
        _chunk(token_count=300, quality_score=80.0,
               search_readiness=SearchReadiness(is_ready=True)),
        _chunk(token_count=100, quality_score=40.0,
               search_readiness=SearchReadiness(is_ready=True)),
        _chunk(token_count=20, quality_score=30.0,
               search_readiness=SearchReadiness(is_ready=False, issues=["x"], readiness_score=75)),
        _chunk(token_count=500, quality_score=70.0,
               search_readiness=SearchReadiness(is_ready=True)),
    ]
    report = build_quality_report(chunks)
    assert report.total_chunks == 4
    assert report.average_token_count == 230.0
    assert report.min_token_count == 20
    assert report.max_token_count == 500
    assert report.average_quality_score == 55.0
    assert report.search_ready_count == 3
    assert report.search_ready_percentage == 75.0
    assert report.optimal_size_percentage == 50.0
