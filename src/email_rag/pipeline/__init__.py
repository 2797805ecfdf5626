"""Batch processing of email files into the search index."""

from email_rag.pipeline.batch import BatchProcessor, BatchSummary, FileResult, find_msg_files

__all__ = [
    "BatchProcessor",
    "BatchSummary",
    "FileResult",
    "find_msg_files",
]
