"""Chunk and index many MSG files on a bounded worker pool."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable

from email_rag.chunking.chunker import chunk_email
from email_rag.config import ChunkingConfig
from email_rag.embeddings.base import BaseEmbedder
from email_rag.index.base import BaseSearchIndex
from email_rag.index.documents import assemble_documents
from email_rag.mail.models import EmailRecord
from email_rag.mail.parser import parse_msg_file

logger = logging.getLogger(__name__)

STATUS_SUCCESS = "success"
STATUS_EMPTY = "empty"
STATUS_FAILED = "failed"
STATUS_SKIPPED = "skipped"


@dataclass
class FileResult:
    """Outcome of one file, produced by exactly one worker."""

    path: str
    status: str
    chunk_count: int = 0
    indexed_count: int = 0
    error: str | None = None


@dataclass
class BatchSummary:
    """Batch statistics, folded from FileResults by the collecting thread only."""

    total_files: int = 0
    successful: int = 0
    empty: int = 0
    failed: int = 0
    skipped: int = 0
    total_chunks: int = 0
    total_indexed: int = 0
    failures: list[FileResult] = field(default_factory=list)

    def add(self, result: FileResult) -> None:
        self.total_files += 1
        self.total_chunks += result.chunk_count
        self.total_indexed += result.indexed_count
        if result.status == STATUS_SUCCESS:
            self.successful += 1
        elif result.status == STATUS_EMPTY:
            self.empty += 1
        elif result.status == STATUS_SKIPPED:
            self.skipped += 1
        else:
            self.failed += 1
            self.failures.append(result)


def find_msg_files(directory: str | Path, recursive: bool = True) -> list[Path]:
    directory = Path(directory)
    pattern = "**/*" if recursive else "*"
    return sorted(
        p for p in directory.glob(pattern) if p.is_file() and p.suffix.lower() == ".msg"
    )


class BatchProcessor:
    """Runs parse, chunk, embed and index for each file independently.

    A failing file is recorded and the batch carries on. Setting the stop
    event lets running files finish; files not yet started are skipped.
    """

    def __init__(
        self,
        parser: Callable[[Path], EmailRecord] = parse_msg_file,
        index: BaseSearchIndex | None = None,
        embedder: BaseEmbedder | None = None,
        config: ChunkingConfig | None = None,
        max_workers: int = 4,
    ):
        if max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")
        self.parser = parser
        self.index = index
        self.embedder = embedder
        self.config = config or ChunkingConfig()
        self.max_workers = max_workers

    def process(
        self,
        paths: Iterable[str | Path],
        stop_event: threading.Event | None = None,
    ) -> BatchSummary:
        stop_event = stop_event or threading.Event()
        summary = BatchSummary()
        paths = [Path(p) for p in paths]
        logger.info(f"Processing {len(paths)} files with {self.max_workers} workers")

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = {executor.submit(self._process_file, p, stop_event): p for p in paths}
            for future in as_completed(futures):
                summary.add(future.result())

        logger.info(
            f"Batch complete: {summary.successful} successful, {summary.empty} empty, "
            f"{summary.failed} failed, {summary.skipped} skipped, "
            f"{summary.total_chunks} chunks, {summary.total_indexed} indexed"
        )
        return summary

    def process_file(self, path: str | Path) -> FileResult:
        """Process a single file outside the pool."""
        return self._process_file(Path(path), threading.Event())

    def _process_file(self, path: Path, stop_event: threading.Event) -> FileResult:
        if stop_event.is_set():
            return FileResult(path=str(path), status=STATUS_SKIPPED)
        try:
            email = self.parser(path)
            result = chunk_email(email, self.config)
            if result.is_empty:
                return FileResult(path=str(path), status=STATUS_EMPTY)

            indexed = 0
            if self.index is not None:
                documents = assemble_documents(result, email, self.embedder)
                outcome = self.index.upload_documents(documents)
                indexed = outcome.succeeded
                if outcome.failed:
                    return FileResult(
                        path=str(path),
                        status=STATUS_FAILED,
                        chunk_count=len(result.chunks),
                        indexed_count=indexed,
                        error="; ".join(outcome.errors[:5]),
                    )
            return FileResult(
                path=str(path),
                status=STATUS_SUCCESS,
                chunk_count=len(result.chunks),
                indexed_count=indexed,
            )
        except Exception as e:
            logger.error(f"Failed to process {path.name}: {e}")
            return FileResult(path=str(path), status=STATUS_FAILED, error=str(e))
