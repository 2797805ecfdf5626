"""Approximate token counting.

No real tokenizer is loaded. For English prose a BPE tokenizer emits roughly
three tokens per four words, and punctuation marks usually split into tokens
of their own, so the estimate is ``ceil(words * 0.75 + punctuation * 0.25)``.
The number is only used for chunk budgeting and scoring; it is not exact.
"""

from __future__ import annotations

import math
import re

WORD_TOKEN_RATIO = 0.75
PUNCTUATION_TOKEN_RATIO = 0.25

_PUNCTUATION = re.compile(r"[^\w\s]")


def count_words(text: str | None) -> int:
    """Whitespace-delimited, non-empty tokens."""
    if not text:
        return 0
    return len(text.split())


def estimate_tokens(text: str | None) -> int:
    if not text:
        return 0
    words = count_words(text)
    punctuation = len(_PUNCTUATION.findall(text))
    return math.ceil(words * WORD_TOKEN_RATIO + punctuation * PUNCTUATION_TOKEN_RATIO)
