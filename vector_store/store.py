"""
Vector Store - the Chunks and Documents collections side by side

Owns one ChromaDB client and the two logical collections the pipeline
writes to:
- chunks: embedded ChunkRecords, searched by similarity
- documents: DocumentRecords, bookkeeping only (placeholder vectors)

Chunks belong to documents through document_id. Deleting "a document's
chunks" therefore always means deleting every chunk with that document_id,
whichever document record produced them.

Usage:
    from vector_store import VectorStore, StoreConfig

    store = VectorStore(StoreConfig(persist_directory="./chroma_db"))
    store.ensure_collections_exist()
    removed = store.delete_chunks_for_document("a.pdf")
"""

import logging
from typing import Optional

import chromadb

from .collection import VectorCollection
from .models import ChunkRecord, DocumentRecord, FieldEquals, StoreConfig

logger = logging.getLogger(__name__)

DOCUMENT_PLACEHOLDER_VECTOR = [0.0, 0.0]


class VectorStore:
    """ChromaDB-backed storage for chunk and document records."""

    def __init__(
        self,
        config: Optional[StoreConfig] = None,
        chroma_client: Optional[chromadb.ClientAPI] = None,
    ):
        """
        Initialize the store.

        Args:
            config: Store configuration. Uses defaults if not provided.
            chroma_client: Optional pre-created ChromaDB client (for testing).
                           If not provided, a PersistentClient is created.
        """
        self.config = config or StoreConfig()
        if chroma_client is not None:
            self._client = chroma_client
        else:
            self._client = chromadb.PersistentClient(
                path=self.config.persist_directory,
            )

        self.chunks: VectorCollection[ChunkRecord] = VectorCollection(
            self._client,
            self.config.chunks_collection_name,
            ChunkRecord,
            dimensions=self.config.embedding_dimensions,
            distance_metric=self.config.distance_metric,
        )
        self.documents: VectorCollection[DocumentRecord] = VectorCollection(
            self._client,
            self.config.documents_collection_name,
            DocumentRecord,
            dimensions=len(DOCUMENT_PLACEHOLDER_VECTOR),
            distance_metric="l2",
            placeholder_vector=DOCUMENT_PLACEHOLDER_VECTOR,
        )

    def ensure_collections_exist(self) -> None:
        self.chunks.ensure_collection_exists()
        self.documents.ensure_collection_exists()

    def documents_for_source(self, source_id: str) -> list[DocumentRecord]:
        return self.documents.query(FieldEquals("source_id", source_id))

    def documents_by_id(self, document_id: str) -> list[DocumentRecord]:
        return self.documents.query(FieldEquals("document_id", document_id))

    def chunks_for_document(self, document_id: str) -> list[ChunkRecord]:
        return self.chunks.query(FieldEquals("document_id", document_id))

    def delete_chunks_for_document(self, document_id: str) -> int:
        """
        Delete every chunk carrying document_id.

        Returns:
            Number of chunks deleted (0 if there were none).
        """
        chunks = self.chunks_for_document(document_id)
        return self.chunks.delete_by_key(chunk.key for chunk in chunks)

    def known_source_ids(self) -> list[str]:
        """Distinct source_id values currently recorded in the documents collection."""
        return self.documents.distinct_values("source_id")

    def health_check(self) -> dict:
        """Report collection names and record counts."""
        return {
            "chromadb_ok": True,
            "chunks_collection": self.chunks.name,
            "documents_collection": self.documents.name,
            "chunks_stored": self.chunks.count(),
            "documents_stored": self.documents.count(),
            "persist_directory": self.config.persist_directory,
        }
