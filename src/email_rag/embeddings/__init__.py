"""Embedding backends with abstract base."""

from email_rag.embeddings.base import BaseEmbedder
from email_rag.embeddings.openai import AzureOpenAIEmbedder, OpenAIEmbedder

__all__ = [
    "BaseEmbedder",
    "OpenAIEmbedder",
    "AzureOpenAIEmbedder",
]
