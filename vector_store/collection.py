"""
Vector Collection - one logical record collection on top of ChromaDB

Each collection stores a single pydantic record type (ChunkRecord or
DocumentRecord). Record fields go into Chroma metadata, the chunk text into
the Chroma document slot, and the vector into the embedding slot.

Query model:
- Filters are FieldEquals predicates on a whitelisted metadata field
- There is no "match everything" filter; bulk work iterates field values
  obtained from distinct_values()

Bookkeeping collections without a meaningful vector store a constant
placeholder vector, because Chroma needs an embedding for every record.
"""

import logging
from contextlib import contextmanager
from typing import Any, Generic, Iterable, Iterator, Optional, TypeVar

import chromadb

from .exceptions import (
    CollectionError,
    DimensionMismatchError,
    InvalidPredicateError,
    VectorStoreError,
)
from .models import ChunkRecord, DocumentRecord, FieldEquals

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", ChunkRecord, DocumentRecord)

# Chroma rejects very large single requests
UPSERT_BATCH_SIZE = 500


class VectorCollection(Generic[RecordT]):
    """A typed view over one ChromaDB collection."""

    def __init__(
        self,
        client: chromadb.ClientAPI,
        name: str,
        record_type: type[RecordT],
        dimensions: int,
        distance_metric: str = "cosine",
        placeholder_vector: Optional[list[float]] = None,
    ):
        if placeholder_vector is not None and len(placeholder_vector) != dimensions:
            raise ValueError("placeholder_vector must have the configured dimensions")
        self.name = name
        self.record_type = record_type
        self.dimensions = dimensions
        self.distance_metric = distance_metric
        self.placeholder_vector = placeholder_vector
        self._client = client
        self._collection = None

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def ensure_collection_exists(self) -> None:
        """Create the collection if it is missing. Safe to call repeatedly."""
        try:
            self._collection = self._client.get_or_create_collection(
                name=self.name,
                metadata={"hnsw:space": self.distance_metric},
            )
        except Exception as e:
            raise CollectionError(self.name, e) from e

    @property
    def collection(self):
        if self._collection is None:
            self.ensure_collection_exists()
        return self._collection

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def upsert(self, records: Iterable[RecordT]) -> int:
        """
        Insert or replace records by key.

        Returns:
            Number of records written.

        Raises:
            DimensionMismatchError: If a record's vector has the wrong length.
            VectorStoreError: If ChromaDB rejects the write.
        """
        records = list(records)
        if not records:
            return 0

        ids = [record.key for record in records]
        embeddings = [self._vector_for(record) for record in records]
        metadatas = [record.to_metadata() for record in records]
        documents = None
        if "text" in self.record_type.model_fields:
            documents = [record.text for record in records]

        written = 0
        for start in range(0, len(ids), UPSERT_BATCH_SIZE):
            end = min(start + UPSERT_BATCH_SIZE, len(ids))
            params: dict[str, Any] = {
                "ids": ids[start:end],
                "embeddings": embeddings[start:end],
                "metadatas": metadatas[start:end],
            }
            if documents is not None:
                params["documents"] = documents[start:end]
            with self._store_call("upsert"):
                self.collection.upsert(**params)
            written += end - start

        logger.debug("Upserted %d records into %s", written, self.name)
        return written

    def delete_by_key(self, keys: Iterable[str]) -> int:
        """Delete records by key. Unknown keys are ignored."""
        keys = list(keys)
        if not keys:
            return 0
        with self._store_call("delete"):
            self.collection.delete(ids=keys)
        logger.debug("Deleted %d records from %s", len(keys), self.name)
        return len(keys)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def query(self, predicate: FieldEquals, limit: Optional[int] = None) -> list[RecordT]:
        """
        Return records matching the predicate, in the store's native order.

        Args:
            predicate: Single-field equality filter.
            limit: Maximum records to return; None for all matches.
        """
        self._check_predicate(predicate)
        include = ["metadatas"]
        if "text" in self.record_type.model_fields:
            include.append("documents")

        with self._store_call("query"):
            raw = self.collection.get(
                where=predicate.to_where(),
                limit=limit,
                include=include,
            )

        documents = raw.get("documents") or [None] * len(raw["ids"])
        return [
            self.record_type.from_chroma(key, metadata, document)
            for key, metadata, document in zip(raw["ids"], raw["metadatas"], documents)
        ]

    def nearest_neighbors(
        self,
        vector: list[float],
        k: int,
        predicate: Optional[FieldEquals] = None,
    ) -> list[tuple[RecordT, float]]:
        """
        Return up to k records closest to vector, best first.

        Returns:
            List of (record, distance) pairs.
        """
        if k < 1:
            return []
        self._check_vector(vector)
        if predicate is not None:
            self._check_predicate(predicate)

        with self._store_call("nearest_neighbors"):
            total = self.collection.count()
            if total == 0:
                return []
            params: dict[str, Any] = {
                "query_embeddings": [vector],
                "n_results": min(k, total),
                "include": ["documents", "metadatas", "distances"],
            }
            if predicate is not None:
                params["where"] = predicate.to_where()
            raw = self.collection.query(**params)

        hits: list[tuple[RecordT, float]] = []
        if not raw["ids"] or not raw["ids"][0]:
            return hits

        documents = (raw.get("documents") or [None])[0] or [None] * len(raw["ids"][0])
        for idx, key in enumerate(raw["ids"][0]):
            record = self.record_type.from_chroma(
                key, raw["metadatas"][0][idx], documents[idx]
            )
            hits.append((record, float(raw["distances"][0][idx])))
        return hits

    def distinct_values(self, field: str) -> list[Any]:
        """List the distinct values of a metadata field, sorted."""
        if field not in self.record_type.filter_fields:
            raise InvalidPredicateError(field, self.record_type.filter_fields)
        with self._store_call("distinct_values"):
            raw = self.collection.get(include=["metadatas"])
        values = {meta[field] for meta in raw["metadatas"] if meta and field in meta}
        return sorted(values)

    def count(self) -> int:
        with self._store_call("count"):
            return self.collection.count()

    # -------------------------------------------------------------------------
    # Internal methods
    # -------------------------------------------------------------------------

    def _vector_for(self, record: RecordT) -> list[float]:
        vector = getattr(record, "vector", None) or self.placeholder_vector
        if vector is None:
            raise DimensionMismatchError(self.dimensions, 0, key=record.key)
        if len(vector) != self.dimensions:
            raise DimensionMismatchError(self.dimensions, len(vector), key=record.key)
        return list(vector)

    def _check_vector(self, vector: list[float]) -> None:
        if len(vector) != self.dimensions:
            raise DimensionMismatchError(self.dimensions, len(vector))

    def _check_predicate(self, predicate: FieldEquals) -> None:
        if not isinstance(predicate, FieldEquals):
            raise TypeError(f"Unsupported predicate: {predicate!r}")
        if predicate.field not in self.record_type.filter_fields:
            raise InvalidPredicateError(predicate.field, self.record_type.filter_fields)

    @contextmanager
    def _store_call(self, operation: str) -> Iterator[None]:
        try:
            yield
        except VectorStoreError:
            raise
        except Exception as e:
            raise VectorStoreError(
                message=f"ChromaDB call failed on collection '{self.name}'",
                operation=operation,
                details=str(e),
            ) from e
