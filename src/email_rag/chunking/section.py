"""Cut one section into token-bounded, overlapping chunks."""

from __future__ import annotations

import logging
import re

from email_rag.chunking.models import Chunk, SearchRelevance, Section, SectionType
from email_rag.chunking.sentences import split_sentences
from email_rag.chunking.tokens import estimate_tokens
from email_rag.config import TailPolicy

logger = logging.getLogger(__name__)

# Empirical words-per-token ratio used to size the overlap seed.
WORDS_PER_TOKEN = 1.33

_SECTION_RELEVANCE = {
    SectionType.HEADER: SearchRelevance.HIGH,
    SectionType.BODY: SearchRelevance.HIGH,
    SectionType.QUOTE: SearchRelevance.MEDIUM,
    SectionType.SIGNATURE: SearchRelevance.LOW,
}

# Greedy: everything up to the last sentence terminator in the window.
_LAST_SENTENCE_END = re.compile(r".*[.!?]\s*")


def relevance_for_section(section_type: SectionType | str | None) -> SearchRelevance:
    """Body and Header are High, Quote Medium, Signature Low; no type is Medium."""
    if section_type is None:
        return SearchRelevance.MEDIUM
    return _SECTION_RELEVANCE[SectionType(section_type)]


def chunk_section(
    section: Section,
    target_tokens: int = 384,
    min_tokens: int = 128,
    max_tokens: int = 512,
    overlap_tokens: int = 32,
    undersized_tail: TailPolicy = TailPolicy.DROP,
) -> list[Chunk]:
    """Chunks for ``section`` in reading order.

    A section within ``target_tokens`` becomes a single chunk. Longer
    sections are packed sentence by sentence up to ``max_tokens``; every
    chunk after the first starts with an overlap seed taken from the end of
    the chunk before it. ``chunk_number`` is local to the section here and is
    renumbered per email later.
    """
    content = section.content or ""
    if not content.strip():
        return []

    if estimate_tokens(content) <= target_tokens:
        return [_make_chunk(section, content)]

    chunks: list[Chunk] = []
    buffer = ""
    buffer_tokens = 0
    fresh: list[str] = []  # sentences added since the last flush, without the seed

    for sentence in split_sentences(content):
        sentence_tokens = estimate_tokens(sentence)

        if buffer and buffer_tokens + sentence_tokens > max_tokens:
            chunks.append(_make_chunk(section, buffer, chunk_number=len(chunks) + 1))
            seed = overlap_tail(buffer, overlap_tokens)
            buffer = f"{seed} {sentence}" if seed else sentence
            buffer_tokens = estimate_tokens(buffer)
            fresh = [sentence]
        else:
            buffer = f"{buffer} {sentence}" if buffer else sentence
            buffer_tokens += sentence_tokens
            fresh.append(sentence)

    if buffer:
        if estimate_tokens(buffer) >= min_tokens:
            chunks.append(_make_chunk(section, buffer, chunk_number=len(chunks) + 1))
        else:
            _handle_undersized_tail(section, chunks, buffer, fresh, undersized_tail)

    return chunks


def overlap_tail(text: str, overlap_tokens: int) -> str:
    """Trailing words of ``text`` worth roughly ``overlap_tokens`` tokens.

    The window is cut back to its last sentence terminator when it contains
    one; otherwise the raw word fragment is used, even mid-sentence.
    """
    word_budget = round(overlap_tokens * WORDS_PER_TOKEN)
    if word_budget <= 0 or not text:
        return ""
    window = " ".join(text.split()[-word_budget:])
    try:
        match = _LAST_SENTENCE_END.match(window)
    except Exception as e:
        logger.warning(f"Overlap boundary search failed, using raw words: {e}")
        return window
    if match:
        return match.group(0).strip()
    return window


def _handle_undersized_tail(
    section: Section,
    chunks: list[Chunk],
    buffer: str,
    fresh: list[str],
    policy: TailPolicy,
) -> None:
    if policy is TailPolicy.EMIT or (policy is TailPolicy.MERGE and not chunks):
        chunks.append(_make_chunk(section, buffer, chunk_number=len(chunks) + 1))
    elif policy is TailPolicy.MERGE:
        previous = chunks[-1]
        previous.set_content(f"{previous.content} {' '.join(fresh)}")
    else:
        logger.debug(
            f"Dropped {estimate_tokens(buffer)}-token tail of {section.type.value} "
            f"section starting at line {section.start_line}"
        )


def _make_chunk(section: Section, content: str, chunk_number: int = 0) -> Chunk:
    return Chunk.create(
        chunk_type=section.type,
        content=content,
        section_type=section.type,
        contains_quote=section.is_quoted,
        is_signature=section.type == SectionType.SIGNATURE,
        search_relevance=relevance_for_section(section.type),
        chunk_number=chunk_number,
    )
