"""
Document Source interface consumed by the ingestion orchestrator.

A source knows which documents exist right now and what version they are
at. The orchestrator hands it the DocumentRecords currently stored for the
source and asks what changed.
"""

from abc import ABC, abstractmethod

from vector_store.models import ChunkRecord, DocumentRecord


class DocumentSource(ABC):
    """A corpus of documents with change detection."""

    @property
    @abstractmethod
    def source_id(self) -> str:
        """Stable identity of this source, e.g. ``"<kind>:<location>"``."""

    @abstractmethod
    def get_deleted_documents(
        self, known_documents: list[DocumentRecord]
    ) -> list[DocumentRecord]:
        """Return the known documents whose backing content no longer exists."""

    @abstractmethod
    def get_new_or_modified_documents(
        self, known_documents: list[DocumentRecord]
    ) -> list[DocumentRecord]:
        """Return documents that are new or whose version differs from known_documents."""

    @abstractmethod
    def create_chunks_for_document(self, document: DocumentRecord) -> list[ChunkRecord]:
        """
        Extract, split and embed one document.

        Raises:
            DocumentProcessingError: If the document cannot be turned into chunks.
        """
