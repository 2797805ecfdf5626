"""Chunk Outlook emails for retrieval and index them into a search service."""

from email_rag.chunking import chunk_email
from email_rag.config import ChunkingConfig, Settings, TailPolicy
from email_rag.mail import EmailRecord

__version__ = "0.1.0"

__all__ = [
    "ChunkingConfig",
    "EmailRecord",
    "Settings",
    "TailPolicy",
    "chunk_email",
]
