"""Tests for search-context optimization."""

import pytest

from email_rag.chunking.models import Chunk, SearchRelevance, SectionType
from email_rag.chunking.search_context import (
    context_prefix,
    optimize_for_search,
    search_weight_for,
)
from email_rag.chunking.tokens import estimate_tokens
from email_rag.mail.models import EmailAddress, EmailRecord


def _chunks():
    return [
        Chunk.create(SectionType.HEADER, "Subject: Budget", search_relevance=SearchRelevance.HIGH),
        Chunk.create(SectionType.BODY, "Numbers attached.", search_relevance=SearchRelevance.HIGH),
        Chunk.create(SectionType.QUOTE, "> earlier", search_relevance=SearchRelevance.MEDIUM),
        Chunk.create(SectionType.SIGNATURE, "--\nAlice", search_relevance=SearchRelevance.LOW),
    ]


def test_prefix_added_and_counts_recomputed():
    email = EmailRecord(subject="Budget", sender=EmailAddress("Alice", "alice@example.com"))
    header, body, quote, signature = optimize_for_search(_chunks(), email)

    assert body.content == "Email Subject: Budget | From: Alice\n\nNumbers attached."
    assert body.has_context is True
    assert body.optimized_for_search is True
    assert body.token_count == estimate_tokens(body.content)
    assert body.word_count == len(body.content.split())
    assert body.search_weight == 1.0
    assert quote.search_weight == 0.7
    assert signature.search_weight == 0.3


def test_header_passes_through():
    email = EmailRecord(subject="Budget", sender=EmailAddress("Alice"))
    header = optimize_for_search(_chunks(), email)[0]
    assert header.content == "Subject: Budget"
    assert header.has_context is False
    assert header.optimized_for_search is False
    assert header.search_weight == 0.5


def test_no_context_available():
    body = optimize_for_search(_chunks(), EmailRecord())[1]
    assert body.content == "Numbers attached."
    assert body.has_context is False
    assert body.optimized_for_search is True


def test_context_prefix_parts():
    assert context_prefix("S", "") == "Email Subject: S"
    assert context_prefix("", "Bob") == "From: Bob"
    assert context_prefix("", "") == ""


def test_search_weights():
    assert search_weight_for(None) == 0.5
    assert search_weight_for("Medium") == 0.7
    for relevance in SearchRelevance:
        assert search_weight_for(relevance) in (1.0, 0.7, 0.3)
    with pytest.raises(ValueError):
        search_weight_for("Critical")
