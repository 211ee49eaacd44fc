"""Tests for ingestion.documents — DocumentService."""

import pytest

from conftest import make_pdf
from ingestion.documents import DocumentService
from ingestion.pdf_source import PDFDirectorySource


@pytest.fixture
def pdf_dir(tmp_path):
    make_pdf(tmp_path / "b.pdf", ["The exam is in the semester break."])
    make_pdf(tmp_path / "a.pdf", ["The thesis deadline is in March."])
    (tmp_path / "readme.txt").write_text("ignore me", encoding="utf-8")
    return tmp_path


@pytest.fixture
def service(cleaner, pdf_dir):
    return DocumentService(cleaner, pdf_dir)


@pytest.fixture
def ingested(store, ingestor, embedder, pdf_dir):
    ingestor.ingest(PDFDirectorySource(pdf_dir, embedder))
    return store


class TestAvailableDocuments:
    def test_sorted_pdfs_only(self, service):
        assert service.get_available_documents() == ["a.pdf", "b.pdf"]

    def test_missing_directory(self, cleaner, tmp_path):
        assert DocumentService(cleaner, tmp_path / "nowhere").get_available_documents() == []


class TestDeleteDocument:
    def test_deletes_file_and_data(self, service, ingested, pdf_dir):
        assert ingested.chunks_for_document("a.pdf")

        assert service.delete_document("a.pdf") is True

        assert not (pdf_dir / "a.pdf").exists()
        assert ingested.chunks_for_document("a.pdf") == []
        assert ingested.documents_by_id("a.pdf") == []
        assert ingested.chunks_for_document("b.pdf")

    @pytest.mark.parametrize("name", ["", "   ", "../a.pdf", "sub/a.pdf"])
    def test_rejects_unsafe_names(self, service, pdf_dir, name):
        assert service.delete_document(name) is False
        assert (pdf_dir / "a.pdf").exists()

    def test_missing_file(self, service):
        assert service.delete_document("nope.pdf") is False

    def test_store_failure_keeps_file(self, service, pdf_dir, monkeypatch):
        def broken(_):
            raise RuntimeError("store down")

        monkeypatch.setattr(service.cleaner, "clear_document", broken)
        assert service.delete_document("a.pdf") is False
        assert (pdf_dir / "a.pdf").exists()
