"""
Ingestion component for the RAG pipeline.

Reconciles PDF document sources with the vector store, and provides the
maintenance operations that repair it.

Quick Start:
    from ingestion import build_pipeline

    pipeline = build_pipeline()
    report = pipeline.ingestor.ingest(pipeline.pdf_source("Data"))
    stats = pipeline.cleaner.cleanup_duplicates()
"""

__version__ = "1.0.0"

from .cleaner import VectorDatabaseCleaner
from .config import IngestionConfig
from .documents import DocumentService
from .exceptions import (
    DocumentProcessingError,
    IngestionError,
    SourceError,
    SourceNotFoundError,
)
from .ingestor import DocumentIngestor
from .models import CleanupStats, IngestionReport
from .pdf_source import PDFDirectorySource
from .pipeline import Pipeline, build_pipeline
from .source import DocumentSource
from .text_splitter import split_paragraphs

__all__ = [
    "__version__",
    "DocumentIngestor",
    "VectorDatabaseCleaner",
    "DocumentService",
    "DocumentSource",
    "PDFDirectorySource",
    "IngestionConfig",
    "IngestionReport",
    "CleanupStats",
    "Pipeline",
    "build_pipeline",
    "split_paragraphs",
    "IngestionError",
    "SourceError",
    "SourceNotFoundError",
    "DocumentProcessingError",
]
