"""Regex sentence splitting with short-fragment coalescing."""

from __future__ import annotations

import re

MIN_SENTENCE_CHARS = 10

# ., ! or ? followed by whitespace and a capital letter; the punctuation stays
# with the sentence it ends.
_SENTENCE_BOUNDARY = re.compile(r"(?<=[.!?])\s+(?=[A-Z])")


def split_sentences(text: str) -> list[str]:
    """Sentence-like units of ``text``.

    Fragments shorter than ``MIN_SENTENCE_CHARS`` (``Dr.``, initials) are
    appended to the previous sentence instead of standing alone.
    """
    if not text or not text.strip():
        return []

    sentences: list[str] = []
    for fragment in _SENTENCE_BOUNDARY.split(text.strip()):
        fragment = fragment.strip()
        if not fragment:
            continue
        if len(fragment) < MIN_SENTENCE_CHARS and sentences:
            sentences[-1] = f"{sentences[-1]} {fragment}"
        else:
            sentences.append(fragment)
    return sentences
