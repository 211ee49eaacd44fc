"""
Vector Database Cleaner - idempotent repair operations

Operations:
- clear_all_data: remove every document and chunk of every known source
- clear_document: remove one document_id everywhere, whatever its source
- cleanup_duplicates: collapse repeated document_ids to the newest version

The store has no "match everything" filter, so clear_all_data walks source
ids: the distinct source_id values found in the documents collection plus a
configured list of conventional ids. Chunks are reached through the
document_ids of those records.

Every operation logs and re-raises on failure. Deletions already applied
stay applied; re-running the operation finishes the job.
"""

from __future__ import annotations

from collections import defaultdict
from contextlib import nullcontext
import logging
import threading
from typing import Iterable, Optional

from vector_store.models import DocumentRecord
from vector_store.store import VectorStore

from .config import DEFAULT_KNOWN_SOURCE_IDS
from .models import CleanupStats

logger = logging.getLogger(__name__)


class VectorDatabaseCleaner:
    """Maintenance operations over the Chunks and Documents collections."""

    def __init__(
        self,
        store: VectorStore,
        known_source_ids: Iterable[str] = DEFAULT_KNOWN_SOURCE_IDS,
        lock: Optional[threading.Lock] = None,
    ):
        """
        Initialize the cleaner.

        Args:
            store: Vector store holding both collections.
            known_source_ids: Source ids to clear even if the store cannot
                              list them (records written by older setups).
            lock: The ingestor's lock, to keep cleanup and ingestion apart.
        """
        self.store = store
        self.known_source_ids = tuple(known_source_ids)
        self.lock = lock

    def clear_all_data(self) -> CleanupStats:
        """Delete all documents and their chunks for every known source."""
        logger.warning("Clearing all vector database data...")
        with self._locked():
            try:
                self.store.ensure_collections_exist()
                total = CleanupStats()
                for source_id in self._source_ids():
                    stats = self._clear_source(source_id)
                    logger.info(
                        "Cleared %d documents and %d chunks for SourceId: %s",
                        stats.documents_deleted, stats.chunks_deleted, source_id,
                    )
                    total.add(stats)
            except Exception as e:
                logger.error("Error clearing vector database: %s", e, exc_info=True)
                raise

        logger.info(
            "Vector database cleared - deleted %d documents and %d chunks",
            total.documents_deleted, total.chunks_deleted,
        )
        return total

    def clear_document(self, document_id: str) -> CleanupStats:
        """Delete all chunks and document records for document_id, any source."""
        logger.info("Clearing data for document %s", document_id)
        with self._locked():
            try:
                self.store.ensure_collections_exist()
                stats = CleanupStats(
                    chunks_deleted=self.store.delete_chunks_for_document(document_id),
                )
                documents = self.store.documents_by_id(document_id)
                stats.documents_deleted = self.store.documents.delete_by_key(
                    d.key for d in documents
                )
            except Exception as e:
                logger.error("Error clearing document %s: %s", document_id, e, exc_info=True)
                raise

        if stats.total:
            logger.info(
                "Deleted %d chunks and %d document records for %s",
                stats.chunks_deleted, stats.documents_deleted, document_id,
            )
        return stats

    def cleanup_duplicates(self, source_id: Optional[str] = None) -> CleanupStats:
        """
        Keep one record per document_id: the one with the greatest version.

        Args:
            source_id: Restrict to one source. If omitted, all known sources
                       are scanned and grouped together.

        Chunks are keyed by document_id only, so the chunks of a duplicate
        cannot be told apart from the survivor's. They stay with the
        survivor; only the surplus records are deleted.
        """
        logger.info(
            "Cleaning up duplicate documents for sourceId: %s", source_id or "all sources"
        )
        with self._locked():
            try:
                self.store.ensure_collections_exist()
                stats = self._cleanup_duplicates(source_id)
            except Exception as e:
                logger.error("Error during duplicate cleanup: %s", e, exc_info=True)
                raise
        logger.info("Duplicate cleanup completed")
        return stats

    def _cleanup_duplicates(self, source_id: Optional[str]) -> CleanupStats:
        stats = CleanupStats()
        source_ids = [source_id] if source_id else self._source_ids()
        documents: list[DocumentRecord] = []
        for sid in source_ids:
            documents.extend(self.store.documents_for_source(sid))

        if not documents:
            logger.info("No documents found for cleanup")
            return stats

        groups: dict[str, list[DocumentRecord]] = defaultdict(list)
        for document in documents:
            groups[document.document_id].append(document)
        duplicate_groups = {k: v for k, v in groups.items() if len(v) > 1}

        if not duplicate_groups:
            logger.info("No duplicate documents found")
            return stats

        logger.info("Found %d documents with duplicates", len(duplicate_groups))
        for document_id, group in sorted(duplicate_groups.items()):
            ordered = sorted(group, key=lambda d: d.document_version, reverse=True)
            to_delete = ordered[1:]
            logger.info(
                "Document %s: keeping version %s, deleting %d duplicates",
                document_id, ordered[0].document_version, len(to_delete),
            )
            stats.documents_deleted += self.store.documents.delete_by_key(
                d.key for d in to_delete
            )
        return stats

    def _clear_source(self, source_id: str) -> CleanupStats:
        stats = CleanupStats()
        documents = self.store.documents_for_source(source_id)
        for document_id in sorted({d.document_id for d in documents}):
            stats.chunks_deleted += self.store.delete_chunks_for_document(document_id)
        stats.documents_deleted = self.store.documents.delete_by_key(
            d.key for d in documents
        )
        return stats

    def _source_ids(self) -> list[str]:
        stored = self.store.known_source_ids()
        return sorted(set(stored) | set(self.known_source_ids))

    def _locked(self):
        return self.lock if self.lock is not None else nullcontext()
