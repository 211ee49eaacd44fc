"""Tests for ingestion.app — HTTP admin/search API."""

import pytest
from fastapi.testclient import TestClient

from conftest import make_pdf
from ingestion.app import create_app
from ingestion.config import IngestionConfig
from ingestion.pipeline import build_pipeline


@pytest.fixture
def pdf_dir(tmp_path):
    directory = tmp_path / "Data"
    directory.mkdir()
    make_pdf(directory / "rules.pdf", [
        "The thesis is worth twelve credits.",
        "Every module ends with an exam.",
    ])
    make_pdf(directory / "faq.pdf", ["Ask the library about the deadline."])
    return directory


@pytest.fixture
def pipeline(chroma_client, store_config, embedder, pdf_dir):
    config = IngestionConfig(
        pdf_directory=str(pdf_dir),
        ingest_on_startup=False,
        known_source_ids=(),
        store=store_config,
    )
    return build_pipeline(config, chroma_client=chroma_client, embedder=embedder)


@pytest.fixture
def client(pipeline):
    with TestClient(create_app(pipeline=pipeline)) as test_client:
        yield test_client


class TestStartup:
    def test_ingests_on_startup(self, pipeline):
        pipeline.config.ingest_on_startup = True
        with TestClient(create_app(pipeline=pipeline)):
            pass
        assert len(pipeline.store.chunks_for_document("rules.pdf")) == 2

    def test_no_startup_ingestion(self, client, pipeline):
        assert pipeline.store.chunks.count() == 0


class TestHealthAndDocuments:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["chromadb_ok"] is True

    def test_list_documents(self, client):
        assert client.get("/documents").json() == ["faq.pdf", "rules.pdf"]

    def test_delete_document(self, client, pdf_dir):
        client.post("/ingest", json={})
        response = client.delete("/documents/faq.pdf")
        assert response.status_code == 200
        assert not (pdf_dir / "faq.pdf").exists()

    def test_delete_missing_document(self, client):
        assert client.delete("/documents/nope.pdf").status_code == 404


class TestIngestAndSearch:
    def test_ingest(self, client):
        response = client.post("/ingest", json={})
        assert response.status_code == 200
        report = response.json()
        assert report["processed"] == {"faq.pdf": 1, "rules.pdf": 2}
        assert report["documents_found"] == 0

    def test_ingest_missing_directory(self, client, tmp_path):
        response = client.post("/ingest", json={"directory": str(tmp_path / "nowhere")})
        assert response.status_code == 404

    def test_search(self, client):
        client.post("/ingest", json={})
        response = client.post("/search", json={"query": "thesis credits", "max_results": 2})
        assert response.status_code == 200
        hits = response.json()
        assert len(hits) == 2
        assert hits[0]["document_id"] == "rules.pdf"
        assert hits[0]["page_number"] == 1

    def test_search_filtered(self, client):
        client.post("/ingest", json={})
        hits = client.post(
            "/search", json={"query": "exam", "document_id": "faq.pdf"}
        ).json()
        assert hits
        assert {hit["document_id"] for hit in hits} == {"faq.pdf"}

    def test_search_rejects_empty_query(self, client):
        assert client.post("/search", json={"query": ""}).status_code == 422


class TestAdmin:
    def test_clear_all(self, client, pipeline):
        client.post("/ingest", json={})
        response = client.post("/admin/clear-all")
        assert response.status_code == 200
        assert response.json()["chunks_deleted"] == 3
        assert response.json()["total"] == 5
        assert pipeline.store.chunks.count() == 0

    def test_clear_document(self, client, pipeline):
        client.post("/ingest", json={})
        stats = client.delete("/admin/documents/rules.pdf").json()
        assert stats == {"documents_deleted": 1, "chunks_deleted": 2, "total": 3}
        assert pipeline.store.documents.count() == 1

    def test_cleanup_duplicates(self, client):
        client.post("/ingest", json={})
        response = client.post("/admin/cleanup-duplicates")
        assert response.status_code == 200
        assert response.json()["total"] == 0
