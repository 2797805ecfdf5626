"""Tests for token estimation."""

from email_rag.chunking.tokens import count_words, estimate_tokens


def test_empty_input_is_zero():
    assert estimate_tokens("") == 0
    assert estimate_tokens(None) == 0
    assert estimate_tokens("   \n\t") == 0


def test_words_only():
    # 4 words * 0.75 = 3
    assert estimate_tokens("one two three four") == 3
    # 2 words * 0.75 = 1.5, rounded up
    assert estimate_tokens("Hello world") == 2


def test_punctuation_adds_quarter_tokens():
    # 2 words (1.5) + 2 punctuation marks (0.5)
    assert estimate_tokens("Hello, world!") == 2
    # 3 words (2.25) + 4 punctuation marks (1.0)
    assert estimate_tokens("Wait... really, ok") == 4


def test_estimate_is_stable():
    text = "The quarterly review, scheduled for Monday, covers Q3 results."
    assert estimate_tokens(text) == estimate_tokens(text)


def test_count_words():
    assert count_words("  a  b \n c ") == 3
    assert count_words("") == 0
    assert count_words(None) == 0
