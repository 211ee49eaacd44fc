"""
Wiring for the ingestion and retrieval components.

Builds one VectorStore, one embedder and one ingestor per process. The
ingestor's lock is handed to the cleaner so ingestion passes and
maintenance operations never interleave.
"""

from dataclasses import dataclass
from typing import Optional

import chromadb

from retrieval.service import SemanticSearch
from vector_store.embedder import EmbeddingProvider, OllamaEmbedder
from vector_store.store import VectorStore

from .cleaner import VectorDatabaseCleaner
from .config import IngestionConfig
from .documents import DocumentService
from .ingestor import DocumentIngestor
from .pdf_source import PDFDirectorySource


@dataclass
class Pipeline:
    config: IngestionConfig
    store: VectorStore
    embedder: EmbeddingProvider
    ingestor: DocumentIngestor
    cleaner: VectorDatabaseCleaner
    search: SemanticSearch
    documents: DocumentService

    def pdf_source(self, directory: Optional[str] = None) -> PDFDirectorySource:
        return PDFDirectorySource(
            directory or self.config.pdf_directory,
            self.embedder,
            chunk_size_chars=self.config.chunk_size_chars,
            max_file_size_mb=self.config.max_file_size_mb,
        )


def build_pipeline(
    config: Optional[IngestionConfig] = None,
    chroma_client: Optional[chromadb.ClientAPI] = None,
    embedder: Optional[EmbeddingProvider] = None,
) -> Pipeline:
    cfg = config or IngestionConfig()
    store = VectorStore(cfg.store, chroma_client=chroma_client)
    embedder = embedder or OllamaEmbedder(
        model=cfg.store.embedding_model,
        base_url=cfg.store.ollama_base_url,
        expected_dimensions=cfg.store.embedding_dimensions,
    )
    ingestor = DocumentIngestor(store, fail_fast=cfg.fail_fast)
    cleaner = VectorDatabaseCleaner(
        store,
        known_source_ids=cfg.known_source_ids,
        lock=ingestor.lock,
    )
    return Pipeline(
        config=cfg,
        store=store,
        embedder=embedder,
        ingestor=ingestor,
        cleaner=cleaner,
        search=SemanticSearch(store, embedder, cfg.default_max_results),
        documents=DocumentService(cleaner, cfg.pdf_directory),
    )
