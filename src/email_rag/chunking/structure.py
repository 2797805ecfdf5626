"""Split a cleaned email body into Body, Quote and Signature sections."""

from __future__ import annotations

import logging
import re

from email_rag.chunking.models import Section, SectionType, StructureResult

logger = logging.getLogger(__name__)

QUOTE_START_PATTERNS = [
    re.compile(r"^>"),
    re.compile(r"^On .* wrote:", re.IGNORECASE),
    re.compile(r"^From:.*Sent:", re.IGNORECASE),
]

SIGNATURE_START_PATTERNS = [
    re.compile(r"^--$"),
    re.compile(r"^(best regards|kind regards|sincerely|thanks)\b", re.IGNORECASE),
    re.compile(r"sent from my (iphone|android|mobile)", re.IGNORECASE),
]


def preprocess_text(text: str) -> str:
    """Normalise line endings and whitespace before structure extraction.

    Line endings become ``\\n``, runs of spaces and tabs collapse to one space,
    every line is trimmed and three or more consecutive newlines collapse to a
    single blank line.
    """
    if not text:
        return ""
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = re.sub(r"[ \t]+", " ", text)
    text = "\n".join(line.strip() for line in text.split("\n"))
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def is_quote_start(line: str) -> bool:
    return any(p.search(line) for p in QUOTE_START_PATTERNS)


def is_signature_start(line: str) -> bool:
    return any(p.search(line) for p in SIGNATURE_START_PATTERNS)


def extract_structure(content: str) -> list[Section]:
    """Ordered, non-overlapping sections of ``content``. Never raises."""
    return try_extract_structure(content).sections


def try_extract_structure(content: str) -> StructureResult:
    """Like ``extract_structure`` but reports whether the fallback was used."""
    try:
        return StructureResult(sections=_scan_sections(content))
    except Exception as e:
        logger.warning(f"Structure extraction failed, using a single Body section: {e}")
        return StructureResult(
            sections=[Section(type=SectionType.BODY, content=content or "")],
            degraded=True,
            error=str(e),
        )


def _scan_sections(content: str) -> list[Section]:
    if not content or not content.strip():
        return []

    lines = content.split("\n")
    sections: list[Section] = []
    current = Section(type=SectionType.BODY, content="", start_line=0)
    buffer: list[str] = []

    def flush() -> None:
        text = "\n".join(buffer)
        if text.strip():
            current.content = text.strip()
            sections.append(current)

    for index, line in enumerate(lines):
        if is_signature_start(line):
            # A signature is terminal: it owns every remaining line.
            flush()
            sections.append(Section(
                type=SectionType.SIGNATURE,
                content="\n".join(lines[index:]).strip(),
                start_line=index,
            ))
            return sections

        if is_quote_start(line):
            # Every quote-start line opens its own Quote section, "> " lines included.
            flush()
            current = Section(
                type=SectionType.QUOTE, content="", start_line=index, is_quoted=True
            )
            buffer = []

        buffer.append(line)

    flush()
    return sections
