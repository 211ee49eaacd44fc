"""
Vector Store Module - ChromaDB + Ollama local embedding storage

Keeps two ChromaDB collections for the RAG pipeline: embedded chunks that
are searched by similarity, and document records used to reconcile the
store with its sources.

Quick Start:
    from vector_store import VectorStore, OllamaEmbedder, FieldEquals

    store = VectorStore()
    store.ensure_collections_exist()
    docs = store.documents.query(FieldEquals("source_id", "PDFDirectorySource:Data"))
"""

__version__ = "1.0.0"

from .collection import VectorCollection
from .embedder import EmbeddingProvider, OllamaEmbedder
from .exceptions import (
    CollectionError,
    DimensionMismatchError,
    EmbeddingError,
    InvalidPredicateError,
    VectorStoreError,
)
from .models import (
    ChunkRecord,
    DocumentRecord,
    FieldEquals,
    SearchResult,
    StoreConfig,
)
from .store import VectorStore

__all__ = [
    "__version__",
    "VectorStore",
    "VectorCollection",
    "OllamaEmbedder",
    "EmbeddingProvider",
    "StoreConfig",
    "ChunkRecord",
    "DocumentRecord",
    "FieldEquals",
    "SearchResult",
    "VectorStoreError",
    "CollectionError",
    "DimensionMismatchError",
    "InvalidPredicateError",
    "EmbeddingError",
]
