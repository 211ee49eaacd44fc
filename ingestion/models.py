"""
Data Models for Ingestion and Maintenance

Defines:
1. IngestionReport - Outcome of one reconciliation pass over a source
2. CleanupStats - Records removed by a maintenance operation
3. IngestRequest, SearchRequest, SearchHit - HTTP admin API payloads
"""

from typing import Optional

from pydantic import BaseModel, Field, computed_field


class IngestionReport(BaseModel):
    """Outcome of one ingestion pass."""
    source_id: str = Field(
        ...,
        description="Source that was reconciled",
    )
    documents_found: int = Field(
        0,
        description="Document records recorded for the source before the pass",
    )
    duplicates: dict[str, int] = Field(
        default_factory=dict,
        description="document_id -> number of records sharing it",
    )
    deleted: list[str] = Field(
        default_factory=list,
        description="document_ids removed because the source no longer has them",
    )
    processed: dict[str, int] = Field(
        default_factory=dict,
        description="document_id -> number of chunks written",
    )
    failed: dict[str, str] = Field(
        default_factory=dict,
        description="document_id -> error message (isolated mode only)",
    )
    duration_seconds: float = Field(
        0.0,
        description="Wall-clock duration of the pass, including lock wait",
    )

    @property
    def succeeded(self) -> bool:
        return not self.failed


class CleanupStats(BaseModel):
    """Records removed by a maintenance operation."""
    documents_deleted: int = 0
    chunks_deleted: int = 0

    @computed_field
    @property
    def total(self) -> int:
        return self.documents_deleted + self.chunks_deleted

    def add(self, other: "CleanupStats") -> None:
        self.documents_deleted += other.documents_deleted
        self.chunks_deleted += other.chunks_deleted


class IngestRequest(BaseModel):
    directory: Optional[str] = Field(
        None,
        description="PDF directory to ingest; defaults to the configured one",
    )


class SearchRequest(BaseModel):
    query: str = Field(..., min_length=1)
    document_id: Optional[str] = None
    max_results: int = Field(5, ge=1, le=50)


class SearchHit(BaseModel):
    document_id: str
    page_number: int
    chunk_index: int
    text: str
    similarity: float
