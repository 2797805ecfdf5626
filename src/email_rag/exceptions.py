"""Unified exception hierarchy for email-rag."""


class EmailRagError(Exception):
    """Base exception for all email-rag errors."""


# Configuration
class ConfigError(EmailRagError):
    """Invalid chunking configuration or missing settings."""


# Mail
class MailParseError(EmailRagError):
    """Failed to read or parse an email file."""


# Chunking
class ChunkingError(EmailRagError):
    """Unexpected failure inside the chunking pipeline."""


# Embeddings
class EmbeddingError(EmailRagError):
    """Base exception for embedding operations."""


# Search index
class SearchIndexError(EmailRagError):
    """Base exception for indexing and search operations."""
