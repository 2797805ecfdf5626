"""Data models for the chunking engine."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any

from email_rag.chunking.tokens import count_words, estimate_tokens


class SectionType(str, Enum):
    HEADER = "Header"
    BODY = "Body"
    QUOTE = "Quote"
    SIGNATURE = "Signature"


class SearchRelevance(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


@dataclass
class Section:
    """A structurally homogeneous span of an email body."""

    type: SectionType
    content: str
    start_line: int = 0
    is_quoted: bool = False


@dataclass(frozen=True)
class StructureResult:
    """Sections found in a body, flagged when extraction fell back to one Body section."""

    sections: list[Section]
    degraded: bool = False
    error: str | None = None


@dataclass(frozen=True)
class ChunkingContext:
    """Per-email facts derived once before chunking starts."""

    email_id: str
    subject: str
    sender_name: str
    has_quote_chain: bool
    has_signature: bool
    content_type: str  # "html" or "plain"
    original_length: int
    processed_at: str  # ISO 8601


@dataclass
class SearchReadiness:
    is_ready: bool
    issues: list[str] = field(default_factory=list)
    readiness_score: int = 100


@dataclass
class Chunk:
    """A token-bounded slice of an email prepared for embedding and indexing.

    ``token_count`` and ``word_count`` always describe ``content``; change the
    text through ``set_content`` so they never go stale.
    """

    chunk_type: SectionType
    content: str
    token_count: int = 0
    word_count: int = 0
    section_type: SectionType | None = None
    contains_quote: bool = False
    is_signature: bool = False
    is_header: bool = False
    contains_metadata: bool = False
    processing_priority: str = "Normal"
    search_relevance: SearchRelevance | None = None
    search_weight: float = 0.5
    has_context: bool = False
    optimized_for_search: bool = False

    # Ordering and linkage, assigned once every chunk of the email exists
    id: str = ""
    chunk_number: int = 0
    total_chunks: int = 0
    is_first: bool = False
    is_last: bool = False
    previous_chunk_id: str | None = None
    next_chunk_id: str | None = None

    # Email context
    parent_email_id: str = ""
    email_subject: str = ""
    sender_name: str = ""
    processed_at: str = ""

    quality_score: float = 0.0
    search_readiness: SearchReadiness | None = None

    @classmethod
    def create(cls, chunk_type: SectionType, content: str, **kwargs: Any) -> "Chunk":
        """Build a chunk with counts computed from ``content``."""
        chunk = cls(chunk_type=chunk_type, content=content, **kwargs)
        chunk.set_content(content)
        return chunk

    def set_content(self, content: str) -> None:
        self.content = content
        self.token_count = estimate_tokens(content)
        self.word_count = count_words(content)

    def to_dict(self) -> dict[str, Any]:
        result = asdict(self)
        result["chunk_type"] = self.chunk_type.value
        result["section_type"] = self.section_type.value if self.section_type else None
        result["search_relevance"] = (
            self.search_relevance.value if self.search_relevance else None
        )
        return result


@dataclass(frozen=True)
class QualityReport:
    """Aggregate statistics over one email's chunks."""

    total_chunks: int = 0
    average_token_count: float = 0.0
    min_token_count: int = 0
    max_token_count: int = 0
    average_quality_score: float = 0.0
    search_ready_count: int = 0
    search_ready_percentage: float = 0.0
    optimal_size_percentage: float = 0.0


@dataclass
class ChunkingResult:
    chunks: list[Chunk]
    quality_report: QualityReport
    context: ChunkingContext | None
    processed_at: str
    warnings: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.chunks
