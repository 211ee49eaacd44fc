"""Tests for vector_store.collection and vector_store.store."""

import pytest

from conftest import DIMENSIONS
from vector_store.exceptions import (
    DimensionMismatchError,
    InvalidPredicateError,
)
from vector_store.models import ChunkRecord, DocumentRecord, FieldEquals


def _vector(hot: int) -> list[float]:
    vector = [0.01] * DIMENSIONS
    vector[hot] = 1.0
    return vector


def _chunk(doc_id: str, index: int, hot: int = 0) -> ChunkRecord:
    return ChunkRecord(
        document_id=doc_id,
        page_number=index + 1,
        chunk_index=index,
        text=f"{doc_id} chunk {index}",
        vector=_vector(hot),
    )


class TestUpsertAndQuery:
    def test_upsert_and_query_by_document(self, store):
        store.chunks.upsert([_chunk("a.pdf", 0), _chunk("a.pdf", 1), _chunk("b.pdf", 0)])

        chunks = store.chunks.query(FieldEquals("document_id", "a.pdf"))

        assert len(chunks) == 2
        assert {c.document_id for c in chunks} == {"a.pdf"}
        assert sorted(c.chunk_index for c in chunks) == [0, 1]
        assert all(c.text.startswith("a.pdf chunk") for c in chunks)

    def test_upsert_same_key_replaces(self, store):
        chunk = _chunk("a.pdf", 0)
        store.chunks.upsert([chunk])
        store.chunks.upsert([chunk])

        assert store.chunks.count() == 1

    def test_upsert_empty(self, store):
        assert store.chunks.upsert([]) == 0
        assert store.chunks.count() == 0

    def test_query_limit(self, store):
        store.chunks.upsert([_chunk("a.pdf", i) for i in range(5)])
        assert len(store.chunks.query(FieldEquals("document_id", "a.pdf"), limit=2)) == 2

    def test_query_no_match_is_empty(self, store):
        assert store.chunks.query(FieldEquals("document_id", "missing.pdf")) == []

    def test_documents_round_trip(self, store):
        record = DocumentRecord(source_id="S:1", document_id="a.pdf", document_version="v1")
        store.documents.upsert([record])

        loaded = store.documents_for_source("S:1")

        assert loaded == [record]


class TestValidation:
    def test_wrong_dimensions_rejected(self, store):
        chunk = ChunkRecord(document_id="a.pdf", page_number=1, text="x", vector=[1.0, 2.0])
        with pytest.raises(DimensionMismatchError) as exc_info:
            store.chunks.upsert([chunk])
        assert exc_info.value.expected == DIMENSIONS
        assert exc_info.value.actual == 2
        assert store.chunks.count() == 0

    def test_missing_vector_rejected(self, store):
        chunk = ChunkRecord(document_id="a.pdf", page_number=1, text="x")
        with pytest.raises(DimensionMismatchError):
            store.chunks.upsert([chunk])

    def test_unknown_filter_field(self, store):
        with pytest.raises(InvalidPredicateError):
            store.chunks.query(FieldEquals("source_id", "S:1"))

    def test_non_predicate_rejected(self, store):
        with pytest.raises(TypeError):
            store.chunks.query({"document_id": "a.pdf"})


class TestDelete:
    def test_delete_by_key(self, store):
        chunks = [_chunk("a.pdf", i) for i in range(3)]
        store.chunks.upsert(chunks)

        deleted = store.chunks.delete_by_key([chunks[0].key, chunks[1].key])

        assert deleted == 2
        assert [c.key for c in store.chunks.query(FieldEquals("document_id", "a.pdf"))] == [
            chunks[2].key
        ]

    def test_delete_nothing(self, store):
        assert store.chunks.delete_by_key([]) == 0

    def test_delete_chunks_for_document(self, store):
        store.chunks.upsert([_chunk("a.pdf", 0), _chunk("a.pdf", 1), _chunk("b.pdf", 0)])

        assert store.delete_chunks_for_document("a.pdf") == 2
        assert store.delete_chunks_for_document("a.pdf") == 0
        assert store.chunks.count() == 1


class TestNearestNeighbors:
    def test_ranked_by_similarity(self, store):
        store.chunks.upsert([_chunk("a.pdf", 0, hot=0), _chunk("b.pdf", 0, hot=3)])

        hits = store.chunks.nearest_neighbors(_vector(3), k=2)

        assert [chunk.document_id for chunk, _ in hits] == ["b.pdf", "a.pdf"]
        assert hits[0][1] < hits[1][1]

    def test_filter(self, store):
        store.chunks.upsert([_chunk("a.pdf", 0, hot=0), _chunk("b.pdf", 0, hot=3)])

        hits = store.chunks.nearest_neighbors(_vector(3), k=5, predicate=FieldEquals("document_id", "a.pdf"))

        assert [chunk.document_id for chunk, _ in hits] == ["a.pdf"]

    def test_empty_collection(self, store):
        assert store.chunks.nearest_neighbors(_vector(0), k=3) == []

    def test_query_vector_dimensions_checked(self, store):
        with pytest.raises(DimensionMismatchError):
            store.chunks.nearest_neighbors([1.0], k=1)


class TestDistinctValues:
    def test_known_source_ids(self, store):
        store.documents.upsert([
            DocumentRecord(source_id="S:b", document_id="a.pdf", document_version="1"),
            DocumentRecord(source_id="S:a", document_id="b.pdf", document_version="1"),
            DocumentRecord(source_id="S:a", document_id="c.pdf", document_version="1"),
        ])
        assert store.known_source_ids() == ["S:a", "S:b"]

    def test_unknown_field(self, store):
        with pytest.raises(InvalidPredicateError):
            store.documents.distinct_values("text")


class TestHealthCheck:
    def test_counts(self, store):
        store.chunks.upsert([_chunk("a.pdf", 0)])
        health = store.health_check()
        assert health["chromadb_ok"] is True
        assert health["chunks_stored"] == 1
        assert health["documents_stored"] == 0
