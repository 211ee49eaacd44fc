"""
Custom Exceptions for Document Ingestion.

Exception Hierarchy:
    IngestionError (base)
    ├── SourceError
    │   └── SourceNotFoundError
    └── DocumentProcessingError

Usage:
    from ingestion.exceptions import DocumentProcessingError

    try:
        ingestor.ingest(source)
    except DocumentProcessingError as e:
        print(f"{e.document_id} failed: {e.original_error}")
"""

from __future__ import annotations

from typing import Optional


class IngestionError(Exception):
    """
    Base exception for all ingestion-related errors.

    Attributes:
        message: Human-readable error description
        details: Additional technical details (optional)
    """

    def __init__(
        self,
        message: str = "An ingestion error occurred",
        details: Optional[str] = None,
    ):
        self.message = message
        self.details = details

        full_message = message
        if details:
            full_message = f"{message} | Details: {details}"

        super().__init__(full_message)


class SourceError(IngestionError):
    """Base class for document source errors."""

    def __init__(
        self,
        message: str = "Document source error",
        source_id: Optional[str] = None,
        details: Optional[str] = None,
    ):
        self.source_id = source_id
        if source_id:
            message = f"{message} [{source_id}]"
        super().__init__(message, details)


class SourceNotFoundError(SourceError):
    """Raised when a source's backing location does not exist."""

    def __init__(self, location: str, source_id: Optional[str] = None):
        self.location = location
        super().__init__(
            message=f"Source location not found: {location}",
            source_id=source_id,
        )


class DocumentProcessingError(IngestionError):
    """
    Raised when a single document cannot be turned into chunks.

    Attributes:
        document_id: The document that failed
        original_error: The underlying extraction/embedding/store error
    """

    def __init__(
        self,
        document_id: str,
        original_error: Optional[Exception] = None,
        message: Optional[str] = None,
    ):
        self.document_id = document_id
        self.original_error = original_error
        details = str(original_error) if original_error else None
        super().__init__(
            message or f"Failed to process document: {document_id}",
            details,
        )
