"""End-to-end chunking of one email record."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from email_rag.chunking.header import build_header_chunk
from email_rag.chunking.metadata import assign_metadata
from email_rag.chunking.models import (
    Chunk,
    ChunkingContext,
    ChunkingResult,
    QualityReport,
    Section,
    SectionType,
)
from email_rag.chunking.quality import build_quality_report
from email_rag.chunking.search_context import optimize_for_search
from email_rag.chunking.section import chunk_section
from email_rag.chunking.structure import (
    is_quote_start,
    is_signature_start,
    preprocess_text,
    try_extract_structure,
)
from email_rag.config import ChunkingConfig
from email_rag.exceptions import ChunkingError
from email_rag.mail.models import EmailRecord
from email_rag.mail.parser import strip_html

logger = logging.getLogger(__name__)

NO_CONTENT_WARNING = "No content found to chunk"


def resolve_content(email: EmailRecord) -> tuple[str, str]:
    """Best available body text and its content type ("plain" or "html").

    Priority: cleaned text, extracted text, plain text, raw body, then the
    HTML body with markup stripped.
    """
    for text in (email.cleaned_text, email.extracted_text, email.body_text, email.raw_body):
        if text and text.strip():
            return text, "plain"
    if email.html_body and email.html_body.strip():
        return strip_html(email.html_body), "html"
    return "", "plain"


def chunk_email(email: EmailRecord, config: ChunkingConfig | None = None) -> ChunkingResult:
    """Chunk, enrich, link and score one email.

    An email with no usable content returns an empty result with a warning.
    Anything unexpected is raised as ``ChunkingError``.
    """
    config = config or ChunkingConfig()
    processed_at = datetime.now(timezone.utc).isoformat()

    try:
        raw, content_type = resolve_content(email)
        content = preprocess_text(raw)
        if not content:
            logger.warning(f"{NO_CONTENT_WARNING} in {email.email_id}")
            return ChunkingResult(
                chunks=[],
                quality_report=QualityReport(),
                context=None,
                processed_at=processed_at,
                warnings=[NO_CONTENT_WARNING],
            )

        context = _build_context(email, content, content_type, len(raw), processed_at)
        warnings: list[str] = []

        if config.preserve_structure:
            structure = try_extract_structure(content)
            if structure.degraded:
                warnings.append(f"Structure extraction degraded: {structure.error}")
            sections = structure.sections
        else:
            sections = [Section(type=SectionType.BODY, content=content)]

        chunks: list[Chunk] = []
        header = build_header_chunk(email)
        if header is not None:
            chunks.append(header)

        for section in sections:
            chunks.extend(chunk_section(
                section,
                target_tokens=config.target_tokens,
                min_tokens=config.min_tokens,
                max_tokens=config.max_tokens,
                overlap_tokens=config.overlap_tokens,
                undersized_tail=config.undersized_tail,
            ))

        if config.optimize_for_search:
            optimize_for_search(chunks, email)

        assign_metadata(chunks, context)
        report = build_quality_report(chunks)
    except Exception as e:
        raise ChunkingError(f"Chunking failed for {email.email_id}: {e}") from e

    logger.info(
        f"Chunked {email.email_id}: {report.total_chunks} chunks, "
        f"avg {report.average_token_count} tokens, "
        f"{report.search_ready_percentage}% search ready"
    )
    return ChunkingResult(
        chunks=chunks,
        quality_report=report,
        context=context,
        processed_at=processed_at,
        warnings=warnings,
    )


def _build_context(
    email: EmailRecord,
    content: str,
    content_type: str,
    original_length: int,
    processed_at: str,
) -> ChunkingContext:
    lines = content.split("\n")
    return ChunkingContext(
        email_id=email.email_id,
        subject=email.subject,
        sender_name=email.sender_display_name,
        has_quote_chain=any(is_quote_start(line) for line in lines),
        has_signature=any(is_signature_start(line) for line in lines),
        content_type=content_type,
        original_length=original_length,
        processed_at=processed_at,
    )
