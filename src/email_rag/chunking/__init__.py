"""Email chunking engine: structure, token-bounded chunks, context and scoring."""

from email_rag.chunking.chunker import chunk_email, resolve_content
from email_rag.chunking.header import build_header_chunk
from email_rag.chunking.metadata import assign_metadata
from email_rag.chunking.models import (
    Chunk,
    ChunkingContext,
    ChunkingResult,
    QualityReport,
    SearchReadiness,
    SearchRelevance,
    Section,
    SectionType,
    StructureResult,
)
from email_rag.chunking.quality import build_quality_report, check_readiness, score_chunk
from email_rag.chunking.search_context import optimize_for_search, search_weight_for
from email_rag.chunking.section import chunk_section, overlap_tail, relevance_for_section
from email_rag.chunking.sentences import split_sentences
from email_rag.chunking.structure import extract_structure, preprocess_text, try_extract_structure
from email_rag.chunking.tokens import count_words, estimate_tokens

__all__ = [
    "Chunk",
    "ChunkingContext",
    "ChunkingResult",
    "QualityReport",
    "SearchReadiness",
    "SearchRelevance",
    "Section",
    "SectionType",
    "StructureResult",
    "assign_metadata",
    "build_header_chunk",
    "build_quality_report",
    "check_readiness",
    "chunk_email",
    "chunk_section",
    "count_words",
    "estimate_tokens",
    "extract_structure",
    "optimize_for_search",
    "overlap_tail",
    "preprocess_text",
    "relevance_for_section",
    "resolve_content",
    "score_chunk",
    "search_weight_for",
    "split_sentences",
    "try_extract_structure",
]
