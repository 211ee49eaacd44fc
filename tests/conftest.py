"""
Pytest fixtures for the ingestion, retrieval and vector store tests.

Nothing here talks to Ollama: embeddings come from KeywordEmbedder, a
bag-of-words model over a tiny vocabulary, and ChromaDB runs in memory.
"""

import re
import threading
import uuid
from pathlib import Path
from typing import Callable, Optional

import chromadb
import fitz
import pytest

from ingestion.cleaner import VectorDatabaseCleaner
from ingestion.exceptions import DocumentProcessingError
from ingestion.ingestor import DocumentIngestor
from ingestion.source import DocumentSource
from vector_store.models import ChunkRecord, DocumentRecord, StoreConfig
from vector_store.store import VectorStore

VOCABULARY = [
    "credits", "thesis", "exam", "module",
    "deadline", "library", "semester", "grade",
]
DIMENSIONS = len(VOCABULARY)


class KeywordEmbedder:
    """Deterministic embedder: one dimension per vocabulary word."""

    def __init__(self):
        self.calls = 0
        self._lock = threading.Lock()

    def embed(self, text: str) -> list[float]:
        if not text or not text.strip():
            raise ValueError("Cannot embed empty text")
        with self._lock:
            self.calls += 1
        words = re.findall(r"[a-z]+", text.lower())
        return [0.01 + words.count(word) for word in VOCABULARY]

    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        return [self.embed(text) for text in texts]


class InMemorySource(DocumentSource):
    """
    A document source backed by a dict.

    documents maps document_id -> (version, [(page_number, text), ...]).
    """

    def __init__(
        self,
        name: str,
        embedder: KeywordEmbedder,
        documents: Optional[dict[str, tuple[str, list[tuple[int, str]]]]] = None,
        failing: Optional[set[str]] = None,
        on_create: Optional[Callable[[DocumentRecord], None]] = None,
    ):
        self.name = name
        self.embedder = embedder
        self.documents = dict(documents or {})
        self.failing = failing or set()
        self.on_create = on_create

    @property
    def source_id(self) -> str:
        return f"MemorySource:{self.name}"

    def set_document(self, document_id: str, version: str, pages: list[tuple[int, str]]):
        self.documents[document_id] = (version, pages)

    def remove_document(self, document_id: str):
        del self.documents[document_id]

    def get_deleted_documents(self, known_documents):
        return [d for d in known_documents if d.document_id not in self.documents]

    def get_new_or_modified_documents(self, known_documents):
        latest: dict[str, str] = {}
        for d in known_documents:
            if d.document_id not in latest or d.document_version > latest[d.document_id]:
                latest[d.document_id] = d.document_version
        return [
            DocumentRecord(source_id=self.source_id, document_id=doc_id, document_version=version)
            for doc_id, (version, _) in self.documents.items()
            if latest.get(doc_id) != version
        ]

    def create_chunks_for_document(self, document):
        if self.on_create:
            self.on_create(document)
        if document.document_id in self.failing:
            raise DocumentProcessingError(document.document_id, RuntimeError("broken PDF"))
        _, pages = self.documents[document.document_id]
        vectors = self.embedder.embed_batch([text for _, text in pages])
        return [
            ChunkRecord(
                document_id=document.document_id,
                page_number=page,
                chunk_index=index,
                text=text,
                vector=vector,
            )
            for index, ((page, text), vector) in enumerate(zip(pages, vectors))
        ]


def make_pdf(path: Path, pages: list[str]) -> Path:
    """Write a simple text PDF with one string per page."""
    doc = fitz.open()
    for text in pages:
        page = doc.new_page()
        page.insert_text((72, 72), text, fontsize=11)
    doc.save(str(path))
    doc.close()
    return path


@pytest.fixture
def chroma_client():
    return chromadb.EphemeralClient()


@pytest.fixture
def store_config():
    suffix = uuid.uuid4().hex[:8]
    return StoreConfig(
        chunks_collection_name=f"chunks-{suffix}",
        documents_collection_name=f"documents-{suffix}",
        embedding_dimensions=DIMENSIONS,
    )


@pytest.fixture
def store(chroma_client, store_config):
    vector_store = VectorStore(config=store_config, chroma_client=chroma_client)
    vector_store.ensure_collections_exist()
    return vector_store


@pytest.fixture
def embedder():
    return KeywordEmbedder()


@pytest.fixture
def ingestor(store):
    return DocumentIngestor(store)


@pytest.fixture
def cleaner(store, ingestor):
    return VectorDatabaseCleaner(store, known_source_ids=(), lock=ingestor.lock)


@pytest.fixture
def source(embedder):
    return InMemorySource("main", embedder)
