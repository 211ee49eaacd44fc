"""
Document service - files in the PDF directory and their stored data.

Lists the PDFs an operator can see and deletes one PDF together with its
chunks and document records. Store writes go through the cleaner, so they
take the same lock as ingestion when one is configured.
"""

from __future__ import annotations

from pathlib import Path
import logging

from .cleaner import VectorDatabaseCleaner

logger = logging.getLogger(__name__)


class DocumentService:
    def __init__(self, cleaner: VectorDatabaseCleaner, pdf_directory: str | Path) -> None:
        self.cleaner = cleaner
        self.pdf_directory = Path(pdf_directory)

    def get_available_documents(self) -> list[str]:
        """Filenames of the PDFs in the directory, sorted."""
        if not self.pdf_directory.is_dir():
            return []
        return sorted(
            p.name
            for p in self.pdf_directory.iterdir()
            if p.is_file() and p.suffix.lower() == ".pdf"
        )

    def delete_document(self, file_name: str) -> bool:
        """
        Delete a PDF, its chunks and its document records.

        Returns:
            True if the file was deleted. False for blank or unsafe names,
            missing files, or when any step fails (the error is logged).
        """
        if not file_name or not file_name.strip():
            logger.warning("Refusing to delete document with empty name")
            return False
        if Path(file_name).name != file_name:
            logger.warning("Refusing to delete %r: not a plain file name", file_name)
            return False

        file_path = self.pdf_directory / file_name
        if not file_path.is_file():
            logger.warning("File %s not found at %s", file_name, file_path)
            return False

        try:
            self.cleaner.clear_document(file_name)
            file_path.unlink()
        except Exception as e:
            logger.error("Failed to delete document %s: %s", file_name, e, exc_info=True)
            return False

        logger.info("Deleted physical file %s", file_name)
        return True
