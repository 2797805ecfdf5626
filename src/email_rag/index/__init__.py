"""Search index backends, document assembly and querying.

``ChromaSearchIndex`` needs the optional ``chromadb`` dependency:
    from email_rag.index.chroma import ChromaSearchIndex
"""

from email_rag.index.azure import AzureSearchIndex, build_search_body
from email_rag.index.base import BaseSearchIndex, IndexingSummary, SearchResult
from email_rag.index.documents import assemble_documents, build_search_document, document_key
from email_rag.index.schema import build_index_definition
from email_rag.index.search import EmailSearcher

__all__ = [
    "AzureSearchIndex",
    "BaseSearchIndex",
    "EmailSearcher",
    "IndexingSummary",
    "SearchResult",
    "assemble_documents",
    "build_index_definition",
    "build_search_body",
    "build_search_document",
    "document_key",
]
