"""Shared fakes and fixtures."""

from datetime import datetime

import pytest

from email_rag.embeddings.base import BaseEmbedder
from email_rag.exceptions import EmbeddingError
from email_rag.index.base import BaseSearchIndex, IndexingSummary, SearchResult
from email_rag.mail.models import Attachment, EmailAddress, EmailRecord


class FakeEmbedder(BaseEmbedder):
    """Deterministic vectors; texts containing ``fail_on`` cannot be embedded."""

    dimensions = 3

    def __init__(self, fail_batch: bool = False, fail_on: str | None = None):
        self.fail_batch = fail_batch
        self.fail_on = fail_on
        self.queries: list[str] = []

    def embed(self, text: str) -> list[float]:
        if self.fail_on and self.fail_on in text:
            raise EmbeddingError("model overloaded")
        return [float(len(text)), 1.0, 0.0]

    def embed_query(self, text: str) -> list[float]:
        self.queries.append(text)
        return self.embed(text)

    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        if self.fail_batch:
            raise EmbeddingError("batch rejected")
        return [self.embed(t) for t in texts]


class FakeIndex(BaseSearchIndex):
    def __init__(self, fail_keys: tuple[str, ...] = ()):
        self.fail_keys = fail_keys
        self.documents: dict[str, dict] = {}
        self.searches: list[dict] = []

    def upload_documents(self, documents):
        summary = IndexingSummary()
        for doc in documents:
            if doc["id"] in self.fail_keys:
                summary.failed += 1
                summary.errors.append(f"{doc['id']}: rejected")
            else:
                self.documents[doc["id"]] = doc
                summary.succeeded += 1
        return summary

    def search(self, query=None, vector=None, mode="hybrid", top=10, filter=None):
        self.searches.append(
            {"query": query, "vector": vector, "mode": mode, "top": top, "filter": filter}
        )
        return [SearchResult(doc_id="doc-1", score=1.0, text=query, metadata={})]

    def delete_documents(self, doc_ids):
        for doc_id in doc_ids:
            self.documents.pop(doc_id, None)

    def count(self):
        return len(self.documents)


@pytest.fixture
def email():
    return EmailRecord(
        subject="Q1 report",
        sender=EmailAddress("Alice", "alice@example.com"),
        to=[EmailAddress("Bob", "bob@example.com")],
        cc=[EmailAddress(email="carol@example.com")],
        sent_date=datetime(2024, 1, 15, 9, 30),
        attachments=[Attachment("q1.xlsx")],
        body_text="Revenue grew in every region. Details are at https://intranet.example.com/q1.",
        source_path="C:\\mail\\Q1 report.msg",
    )


@pytest.fixture
def make_embedder():
    return FakeEmbedder


@pytest.fixture
def make_index():
    return FakeIndex
