"""
Custom Exceptions for the Vector Store.

Exception Hierarchy:
    VectorStoreError (base)
    ├── CollectionError
    ├── DimensionMismatchError
    └── InvalidPredicateError
    EmbeddingError

Connection failures to the Ollama server are raised as the builtin
ConnectionError so callers can tell "server down" apart from "model failed".
"""

from __future__ import annotations

from typing import Optional


class VectorStoreError(Exception):
    """
    Base exception for vector store failures.

    Attributes:
        message: Human-readable error description
        operation: Store operation that failed (upsert, delete, query, ...)
        details: Additional technical details (optional)
    """

    def __init__(
        self,
        message: str = "A vector store error occurred",
        operation: Optional[str] = None,
        details: Optional[str] = None,
    ):
        self.message = message
        self.operation = operation
        self.details = details

        full_message = message
        if operation:
            full_message = f"{full_message} (operation: {operation})"
        if details:
            full_message = f"{full_message} | Details: {details}"

        super().__init__(full_message)


class CollectionError(VectorStoreError):
    """Raised when a collection cannot be created or opened."""

    def __init__(self, collection_name: str, original_error: Optional[Exception] = None):
        self.collection_name = collection_name
        self.original_error = original_error
        super().__init__(
            message=f"Cannot open collection '{collection_name}'",
            operation="ensure_collection_exists",
            details=str(original_error) if original_error else None,
        )


class DimensionMismatchError(VectorStoreError):
    """
    Raised when a vector does not have the configured dimensionality.

    Attributes:
        expected: Configured vector length
        actual: Length of the offending vector
        key: Record key carrying the vector (if known)
    """

    def __init__(self, expected: int, actual: int, key: Optional[str] = None):
        self.expected = expected
        self.actual = actual
        self.key = key
        message = f"Expected vector of length {expected}, got {actual}"
        if key:
            message = f"{message} [{key}]"
        super().__init__(message, operation="upsert")


class InvalidPredicateError(VectorStoreError):
    """Raised when a filter names a field the collection cannot filter on."""

    def __init__(self, field: str, allowed: frozenset[str]):
        self.field = field
        super().__init__(
            message=f"Cannot filter on field '{field}'",
            operation="query",
            details=f"allowed fields: {sorted(allowed)}",
        )


class EmbeddingError(RuntimeError):
    """Raised when the embedding model fails to produce a vector."""
