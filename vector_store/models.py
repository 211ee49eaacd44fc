"""
Data Models for the Vector Store

Defines:
1. StoreConfig - Configuration for ChromaDB, Ollama, and embedding settings
2. ChunkRecord - A searchable, embedded span of document text
3. DocumentRecord - Bookkeeping record for one ingested source document
4. FieldEquals - The single filter predicate the store understands
5. SearchResult - A nearest-neighbor hit with distance/similarity

Design Principles:
- Pydantic v2 for validation
- Chunks reference documents by document_id, never by the document key
- Filters are a closed set of tagged variants, not free-form where-dicts
"""

import uuid
from dataclasses import dataclass
from typing import Any, ClassVar, Literal, Union

from pydantic import BaseModel, Field


def new_key() -> str:
    """Generate an opaque, unique record key."""
    return str(uuid.uuid4())


class StoreConfig(BaseModel):
    """Configuration for the vector store."""
    persist_directory: str = Field(
        "./chroma_db",
        description="Directory for ChromaDB persistent storage",
    )
    chunks_collection_name: str = Field(
        "data-chatpdf-chunks",
        description="ChromaDB collection holding embedded chunks",
    )
    documents_collection_name: str = Field(
        "data-chatpdf-documents",
        description="ChromaDB collection holding document bookkeeping records",
    )
    embedding_model: str = Field(
        "nomic-embed-text",
        description="Ollama embedding model name",
    )
    ollama_base_url: str = Field(
        "http://localhost:11434",
        description="Ollama API base URL",
    )
    distance_metric: Literal["cosine", "l2", "ip"] = Field(
        "cosine",
        description="Distance metric for the chunks collection (cosine, l2, ip)",
    )
    embedding_dimensions: int = Field(
        768,
        ge=1,
        description="Vector length every chunk embedding must have",
    )


class ChunkRecord(BaseModel):
    """A unit of retrievable text plus its embedding."""
    filter_fields: ClassVar[frozenset[str]] = frozenset(
        {"document_id", "page_number", "chunk_index"}
    )

    key: str = Field(default_factory=new_key)
    document_id: str = Field(..., min_length=1)
    page_number: int = Field(..., ge=1)
    chunk_index: int = Field(0, ge=0)
    text: str
    vector: list[float] = Field(default_factory=list)

    def to_metadata(self) -> dict[str, Any]:
        return {
            "document_id": self.document_id,
            "page_number": self.page_number,
            "chunk_index": self.chunk_index,
        }

    @classmethod
    def from_chroma(
        cls,
        key: str,
        metadata: dict[str, Any],
        document: str | None,
        embedding: list[float] | None = None,
    ) -> "ChunkRecord":
        return cls(
            key=key,
            document_id=metadata["document_id"],
            page_number=metadata["page_number"],
            chunk_index=metadata.get("chunk_index", 0),
            text=document or "",
            vector=list(embedding) if embedding is not None else [],
        )


class DocumentRecord(BaseModel):
    """
    Bookkeeping record for one ingested source document.

    document_id is meant to be unique per source_id, but the store does not
    enforce it. Duplicates are detected during ingestion and repaired by the
    cleaner.
    """
    filter_fields: ClassVar[frozenset[str]] = frozenset(
        {"source_id", "document_id", "document_version"}
    )

    key: str = Field(default_factory=new_key)
    source_id: str = Field(..., min_length=1)
    document_id: str = Field(..., min_length=1)
    document_version: str = Field(..., min_length=1)

    def to_metadata(self) -> dict[str, Any]:
        return {
            "source_id": self.source_id,
            "document_id": self.document_id,
            "document_version": self.document_version,
        }

    @classmethod
    def from_chroma(
        cls,
        key: str,
        metadata: dict[str, Any],
        document: str | None,
        embedding: list[float] | None = None,
    ) -> "DocumentRecord":
        return cls(
            key=key,
            source_id=metadata["source_id"],
            document_id=metadata["document_id"],
            document_version=metadata["document_version"],
        )


@dataclass(frozen=True)
class FieldEquals:
    """Matches records whose metadata field equals value."""
    field: str
    value: Union[str, int]

    def to_where(self) -> dict[str, Any]:
        return {self.field: self.value}


class SearchResult(BaseModel):
    """A single nearest-neighbor hit from the chunks collection."""
    chunk: ChunkRecord
    distance: float = Field(
        ...,
        description="Distance score (0 = identical, higher = less similar)",
    )
    similarity: float = Field(
        ...,
        description="Similarity score (1 = identical, lower = less similar)",
    )
