"""
Semantic search over the chunks collection.

Embeds the query with the same embedder used during ingestion and asks the
store for the nearest chunks, optionally restricted to one document_id.
Read-only; needs no locking and can serve any number of threads.
"""

import logging
from typing import Optional

from vector_store.embedder import EmbeddingProvider
from vector_store.models import ChunkRecord, FieldEquals, SearchResult
from vector_store.store import VectorStore

logger = logging.getLogger(__name__)


def similarity_from_distance(distance: float, metric: str) -> float:
    """Turn a Chroma distance into a higher-is-better score."""
    if metric in ("cosine", "ip"):
        # Chroma reports 1 - cos(a, b) and 1 - a·b respectively
        return 1.0 - distance
    if metric == "l2":
        return 1.0 / (1.0 + distance)
    raise ValueError(f"Unsupported distance metric: {metric}")


class SemanticSearch:
    def __init__(
        self,
        store: VectorStore,
        embedder: EmbeddingProvider,
        default_max_results: int = 5,
    ):
        self.store = store
        self.embedder = embedder
        self.default_max_results = default_max_results

    def search(
        self,
        query_text: str,
        document_id_filter: Optional[str] = None,
        max_results: Optional[int] = None,
    ) -> list[ChunkRecord]:
        """
        Return up to max_results chunks, most similar first.

        Args:
            query_text: Natural-language query.
            document_id_filter: If non-empty, only chunks of this document.
            max_results: Result limit; defaults to default_max_results.
        """
        hits = self.search_with_scores(query_text, document_id_filter, max_results)
        return [hit.chunk for hit in hits]

    def search_with_scores(
        self,
        query_text: str,
        document_id_filter: Optional[str] = None,
        max_results: Optional[int] = None,
    ) -> list[SearchResult]:
        """Like search(), but keeps distance and similarity for each hit."""
        limit = self.default_max_results if max_results is None else max_results
        if limit < 1 or not query_text or not query_text.strip():
            return []

        vector = self.embedder.embed(query_text)
        predicate = FieldEquals("document_id", document_id_filter) if document_id_filter else None
        hits = self.store.chunks.nearest_neighbors(vector, limit, predicate)

        logger.debug(
            "Search %r (filter=%s) returned %d chunks",
            query_text, document_id_filter or "-", len(hits),
        )
        metric = self.store.chunks.distance_metric
        return [
            SearchResult(
                chunk=chunk,
                distance=round(distance, 6),
                similarity=round(similarity_from_distance(distance, metric), 6),
            )
            for chunk, distance in hits
        ]
