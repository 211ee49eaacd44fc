"""
PDF directory source.

Treats every ``*.pdf`` file directly inside a directory as one document:
- document_id is the filename (with extension)
- document_version is the file's UTC modification time as a fixed-width
  ISO-8601 string, so versions sort lexicographically
- source_id is ``"PDFDirectorySource:<directory>"`` with forward slashes

Text is extracted page by page with PyMuPDF, split into short passages and
embedded in one batch per document.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
import logging
import re

import fitz  # PyMuPDF

from vector_store.embedder import EmbeddingProvider
from vector_store.models import ChunkRecord, DocumentRecord

from .exceptions import DocumentProcessingError, SourceNotFoundError
from .source import DocumentSource
from .text_splitter import split_paragraphs

logger = logging.getLogger(__name__)

SOURCE_KIND = "PDFDirectorySource"


def normalize_location(directory: str | Path) -> str:
    normalized = str(directory).replace("\\", "/")
    if len(normalized) > 1:
        normalized = normalized.rstrip("/")
    return normalized


def file_version(path: Path) -> str:
    modified = datetime.fromtimestamp(path.stat().st_mtime, tz=timezone.utc)
    return modified.strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def clean_page_text(text: str) -> str:
    if not text:
        return ""
    cleaned = text.replace("\r\n", "\n").replace("\r", "\n")
    # "docu-\nment" -> "document"
    cleaned = re.sub(r"(?<=\w)-\n(?=\w)", "", cleaned)
    cleaned = re.sub(r"[ \t]+", " ", cleaned)
    cleaned = re.sub(r"\n{3,}", "\n\n", cleaned)
    return cleaned.strip()


class PDFDirectorySource(DocumentSource):
    """A directory of PDF files."""

    def __init__(
        self,
        directory: str | Path,
        embedder: EmbeddingProvider,
        chunk_size_chars: int = 200,
        max_file_size_mb: int | None = 10,
    ) -> None:
        self.directory = Path(directory)
        self.embedder = embedder
        self.chunk_size_chars = chunk_size_chars
        self.max_file_size_mb = max_file_size_mb
        self._source_id = f"{SOURCE_KIND}:{normalize_location(directory)}"

    @property
    def source_id(self) -> str:
        return self._source_id

    def get_deleted_documents(
        self, known_documents: list[DocumentRecord]
    ) -> list[DocumentRecord]:
        """Known documents whose file is gone or has grown past the size limit."""
        self._require_directory()
        deleted: list[DocumentRecord] = []
        for document in known_documents:
            path = self.directory / document.document_id
            if not path.is_file() or self._too_large(path):
                deleted.append(document)
        return deleted

    def get_new_or_modified_documents(
        self, known_documents: list[DocumentRecord]
    ) -> list[DocumentRecord]:
        self._require_directory()

        latest_known: dict[str, str] = {}
        for document in known_documents:
            current = latest_known.get(document.document_id)
            if current is None or document.document_version > current:
                latest_known[document.document_id] = document.document_version

        results: list[DocumentRecord] = []
        for path in self.list_pdf_files():
            if self._too_large(path):
                continue
            version = file_version(path)
            if latest_known.get(path.name) == version:
                continue
            results.append(
                DocumentRecord(
                    source_id=self.source_id,
                    document_id=path.name,
                    document_version=version,
                )
            )
        return results

    def create_chunks_for_document(self, document: DocumentRecord) -> list[ChunkRecord]:
        path = self.directory / document.document_id
        try:
            passages = self._extract_passages(path)
            vectors = self.embedder.embed_batch([text for _, text in passages])
        except Exception as e:
            raise DocumentProcessingError(document.document_id, e) from e

        return [
            ChunkRecord(
                document_id=document.document_id,
                page_number=page_number,
                chunk_index=index,
                text=text,
                vector=vector,
            )
            for index, ((page_number, text), vector) in enumerate(zip(passages, vectors))
        ]

    def list_pdf_files(self) -> list[Path]:
        """PDF files in the directory, sorted by name."""
        return sorted(
            (p for p in self.directory.iterdir() if p.is_file() and p.suffix.lower() == ".pdf"),
            key=lambda p: p.name,
        )

    def _extract_passages(self, path: Path) -> list[tuple[int, str]]:
        passages: list[tuple[int, str]] = []
        with fitz.open(path) as pdf:
            for page_index, page in enumerate(pdf):
                text = clean_page_text(page.get_text("text", sort=True))
                for passage in split_paragraphs(text, self.chunk_size_chars):
                    passages.append((page_index + 1, passage))
        logger.debug("Extracted %d passages from %s", len(passages), path.name)
        return passages

    def _too_large(self, path: Path) -> bool:
        if not self.max_file_size_mb:
            return False
        size_mb = path.stat().st_size / (1024 * 1024)
        if size_mb > self.max_file_size_mb:
            logger.warning(
                "Skipping %s: %.1f MB exceeds the %d MB limit",
                path.name, size_mb, self.max_file_size_mb,
            )
            return True
        return False

    def _require_directory(self) -> None:
        if not self.directory.is_dir():
            raise SourceNotFoundError(str(self.directory), source_id=self.source_id)
