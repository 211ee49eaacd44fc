"""
Document Ingestor - reconciles a document source with the vector store

One pass over a source:
1. Ensure both collections exist.
2. Load the DocumentRecords stored for the source.
3. Warn about duplicate document_ids (repair is the cleaner's job).
4. Remove documents the source no longer has: chunks first, then the record.
5. For every new or modified document, in the order the source returns them:
   remove chunks and records of ALL stored documents with the same
   document_id, upsert the new record, then create and upsert its chunks.

Only one pass runs at a time per ingestor, across all sources. The lock is a
plain threading.Lock: blocking, not reentrant, no fairness.

Failure policy:
- A document that fails loses its new record and any chunks written for it,
  so the next pass sees it as new and retries it.
- fail_fast=True (default): the first document error is logged and raised as
  DocumentProcessingError; documents already processed in the pass stay.
- fail_fast=False: the error is logged and recorded in the report, and the
  pass continues with the next document.

Usage:
    from ingestion import DocumentIngestor, PDFDirectorySource

    ingestor = DocumentIngestor(store)
    report = ingestor.ingest(PDFDirectorySource("Data", embedder))
"""

from __future__ import annotations

from collections import Counter
import logging
import threading
import time
from typing import Optional

from vector_store.models import DocumentRecord
from vector_store.store import VectorStore

from .exceptions import DocumentProcessingError
from .models import IngestionReport
from .source import DocumentSource

logger = logging.getLogger(__name__)


class DocumentIngestor:
    """Keeps the Chunks and Documents collections in step with document sources."""

    def __init__(
        self,
        store: VectorStore,
        fail_fast: bool = True,
        lock: Optional[threading.Lock] = None,
    ):
        """
        Initialize the ingestor.

        Args:
            store: Vector store holding both collections.
            fail_fast: Abort the pass on the first document error.
            lock: Mutex serializing ingestion passes. Share it with the
                  cleaner so maintenance never interleaves with ingestion.
        """
        self.store = store
        self.fail_fast = fail_fast
        self.lock = lock or threading.Lock()

    def ingest(self, source: DocumentSource) -> IngestionReport:
        """
        Reconcile the store with the current content of source.

        Blocks while another pass holds the lock.

        Raises:
            DocumentProcessingError: In fail-fast mode, for the first
                document that cannot be processed.
            VectorStoreError: If the store cannot be read or written.
        """
        start = time.time()
        with self.lock:
            try:
                report = self._run(source)
            except DocumentProcessingError:
                raise
            except Exception as e:
                logger.error(
                    "Ingestion for source %s failed: %s", source.source_id, e,
                    exc_info=True,
                )
                raise
        report.duration_seconds = round(time.time() - start, 2)
        return report

    def _run(self, source: DocumentSource) -> IngestionReport:
        source_id = source.source_id
        logger.info("Starting ingestion for source %s", source_id)

        self.store.ensure_collections_exist()

        documents_for_source = self.store.documents_for_source(source_id)
        logger.info(
            "Found %d existing documents for source %s",
            len(documents_for_source), source_id,
        )

        report = IngestionReport(
            source_id=source_id,
            documents_found=len(documents_for_source),
            duplicates=self._find_duplicates(documents_for_source),
        )

        for deleted in source.get_deleted_documents(documents_for_source):
            logger.info("Removing ingested data for %s", deleted.document_id)
            try:
                self.store.delete_chunks_for_document(deleted.document_id)
                self.store.documents.delete_by_key([deleted.key])
            except Exception as e:
                logger.error(
                    "Error removing document %s from source %s: %s",
                    deleted.document_id, source_id, e,
                )
                raise
            report.deleted.append(deleted.document_id)

        for modified in source.get_new_or_modified_documents(documents_for_source):
            logger.info("Processing %s", modified.document_id)
            try:
                self._remove_existing(modified, documents_for_source)
                chunk_count = self._ingest_document(source, modified)
            except Exception as e:
                logger.error(
                    "Error processing document %s: %s", modified.document_id, e,
                    exc_info=True,
                )
                self._discard_partial(modified)
                if self.fail_fast:
                    if isinstance(e, DocumentProcessingError):
                        raise
                    raise DocumentProcessingError(modified.document_id, e) from e
                report.failed[modified.document_id] = str(e)
                continue
            report.processed[modified.document_id] = chunk_count
            logger.info(
                "Successfully processed %s with %d chunks",
                modified.document_id, chunk_count,
            )

        if report.failed:
            logger.warning(
                "Ingestion for %s finished with %d failed documents",
                source_id, len(report.failed),
            )
        else:
            logger.info("Ingestion is up-to-date")
        return report

    def _ingest_document(self, source: DocumentSource, document: DocumentRecord) -> int:
        self.store.documents.upsert([document])
        chunks = source.create_chunks_for_document(document)
        return self.store.chunks.upsert(chunks)

    def _discard_partial(self, document: DocumentRecord) -> None:
        """Drop the record and chunks of a failed document so the next pass retries it."""
        try:
            self.store.delete_chunks_for_document(document.document_id)
            self.store.documents.delete_by_key([document.key])
        except Exception as e:
            logger.error(
                "Could not remove partial data for %s: %s", document.document_id, e,
            )

    def _remove_existing(
        self,
        modified: DocumentRecord,
        documents_for_source: list[DocumentRecord],
    ) -> None:
        existing = [
            d for d in documents_for_source if d.document_id == modified.document_id
        ]
        if not existing:
            return
        logger.info(
            "Removing %d existing entries for %s", len(existing), modified.document_id
        )
        for document in existing:
            self.store.delete_chunks_for_document(document.document_id)
            self.store.documents.delete_by_key([document.key])

    @staticmethod
    def _find_duplicates(documents: list[DocumentRecord]) -> dict[str, int]:
        counts = Counter(d.document_id for d in documents)
        duplicates = {doc_id: n for doc_id, n in counts.items() if n > 1}
        if duplicates:
            logger.warning(
                "Found %d documents with duplicate DocumentIds", len(duplicates)
            )
            for doc_id, n in sorted(duplicates.items()):
                logger.warning("Duplicate DocumentId: %s has %d entries", doc_id, n)
        return duplicates
