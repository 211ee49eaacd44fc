from contextlib import asynccontextmanager
import logging

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException

from .config import IngestionConfig
from .exceptions import DocumentProcessingError, SourceNotFoundError
from .models import CleanupStats, IngestionReport, IngestRequest, SearchHit, SearchRequest
from .pipeline import Pipeline, build_pipeline

logger = logging.getLogger(__name__)


def create_app(
    config: IngestionConfig | None = None,
    pipeline: Pipeline | None = None,
) -> FastAPI:
    """
    Build the admin/search API.

    Run with: uvicorn ingestion.app:create_app --factory
    """
    if pipeline is None and config is None:
        load_dotenv()
        config = IngestionConfig.from_env()
    pipe = pipeline or build_pipeline(config)

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        if pipe.config.ingest_on_startup:
            # Content ingested here is reflected back into chat prompts; only
            # point this at trusted documents.
            pipe.ingestor.ingest(pipe.pdf_source())
        yield

    app = FastAPI(
        title="PDF Ingestion Service",
        version="1.0.0",
        description="PDF ingestion, semantic search and vector store maintenance.",
        lifespan=lifespan,
    )

    @app.get("/health")
    def health() -> dict:
        status = {"status": "ok"}
        try:
            status.update(pipe.store.health_check())
        except Exception as exc:
            logger.warning("Vector store health check failed: %s", exc)
            status.update({"status": "degraded", "chromadb_ok": False, "error": str(exc)})
        if hasattr(pipe.embedder, "health_check"):
            embedder_health = pipe.embedder.health_check()
            if not embedder_health.get("healthy", False):
                status["status"] = "degraded"
            status["embedder"] = embedder_health
        return status

    @app.get("/documents", response_model=list[str])
    def documents() -> list[str]:
        return pipe.documents.get_available_documents()

    @app.delete("/documents/{file_name}")
    def delete_document(file_name: str) -> dict:
        if not pipe.documents.delete_document(file_name):
            raise HTTPException(status_code=404, detail=f"Could not delete {file_name}")
        return {"deleted": file_name}

    @app.post("/ingest", response_model=IngestionReport)
    def ingest(request: IngestRequest) -> IngestionReport:
        try:
            return pipe.ingestor.ingest(pipe.pdf_source(request.directory))
        except SourceNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except DocumentProcessingError as exc:
            raise HTTPException(status_code=500, detail=str(exc)) from exc

    @app.post("/search", response_model=list[SearchHit])
    def search(request: SearchRequest) -> list[SearchHit]:
        try:
            hits = pipe.search.search_with_scores(
                request.query, request.document_id, request.max_results
            )
        except Exception as exc:
            raise HTTPException(status_code=500, detail=str(exc)) from exc
        return [
            SearchHit(
                document_id=hit.chunk.document_id,
                page_number=hit.chunk.page_number,
                chunk_index=hit.chunk.chunk_index,
                text=hit.chunk.text,
                similarity=hit.similarity,
            )
            for hit in hits
        ]

    @app.post("/admin/clear-all", response_model=CleanupStats)
    def clear_all() -> CleanupStats:
        try:
            return pipe.cleaner.clear_all_data()
        except Exception as exc:
            raise HTTPException(status_code=500, detail=str(exc)) from exc

    @app.delete("/admin/documents/{document_id}", response_model=CleanupStats)
    def clear_document(document_id: str) -> CleanupStats:
        try:
            return pipe.cleaner.clear_document(document_id)
        except Exception as exc:
            raise HTTPException(status_code=500, detail=str(exc)) from exc

    @app.post("/admin/cleanup-duplicates", response_model=CleanupStats)
    def cleanup_duplicates(source_id: str | None = None) -> CleanupStats:
        try:
            return pipe.cleaner.cleanup_duplicates(source_id)
        except Exception as exc:
            raise HTTPException(status_code=500, detail=str(exc)) from exc

    return app
