"""Lightweight regex entity extraction for chunk and document metadata."""

from __future__ import annotations

import re

_PATTERNS: dict[str, re.Pattern] = {
    "emails": re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b"),
    "urls": re.compile(r"\bhttps?://[^\s<>\"')\]]+", re.IGNORECASE),
    "phone_numbers": re.compile(
        r"(?<!\w)(?:\+?\d{1,3}[\s.-]?)?(?:\(\d{2,4}\)|\d{2,4})[\s.-]\d{3,4}[\s.-]\d{3,4}(?!\w)"
    ),
    "dates": re.compile(
        r"\b(?:\d{4}-\d{2}-\d{2}|\d{1,2}/\d{1,2}/\d{2,4}|"
        r"(?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Sept|Oct|Nov|Dec)[a-z]*\.?\s+\d{1,2}(?:,\s*\d{4})?)\b"
    ),
    "money": re.compile(r"(?:[$€£]\s?\d[\d,]*(?:\.\d{2})?|\b\d[\d,]*(?:\.\d{2})?\s?(?:USD|EUR|GBP)\b)"),
}

ENTITY_TYPES = tuple(_PATTERNS)


def extract_entities(text: str) -> dict[str, list[str]]:
    """Return every entity type with its matches, deduplicated in order."""
    entities: dict[str, list[str]] = {name: [] for name in _PATTERNS}
    if not text:
        return entities
    for name, pattern in _PATTERNS.items():
        seen: set[str] = set()
        for match in pattern.finditer(text):
            value = match.group(0).strip().rstrip(".,;:")
            if value and value not in seen:
                seen.add(value)
                entities[name].append(value)
    return entities
