from dataclasses import dataclass, field
import os

from vector_store.models import StoreConfig

DEFAULT_KNOWN_SOURCE_IDS = (
    "PDFDirectorySource:Data",
    "PDFDirectorySource:wwwroot/Data",
    "PDFDirectorySource:wwwroot\\Data",
)


@dataclass
class IngestionConfig:
    pdf_directory: str = "Data"
    ingest_on_startup: bool = True
    max_file_size_mb: int = 10
    chunk_size_chars: int = 200
    fail_fast: bool = True
    default_max_results: int = 5
    known_source_ids: tuple[str, ...] = DEFAULT_KNOWN_SOURCE_IDS
    store: StoreConfig = field(default_factory=StoreConfig)

    @classmethod
    def from_env(cls) -> "IngestionConfig":
        def _int(name: str, default: int) -> int:
            value = os.environ.get(name)
            return int(value) if value else default

        def _bool(name: str, default: bool) -> bool:
            value = os.environ.get(name)
            if not value:
                return default
            return value.strip().lower() in {"1", "true", "yes", "on"}

        def _list(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
            value = os.environ.get(name)
            if not value:
                return default
            return tuple(item.strip() for item in value.split(",") if item.strip())

        defaults = StoreConfig()
        store = StoreConfig(
            persist_directory=os.environ.get("CHROMA_PERSIST_DIR", defaults.persist_directory),
            chunks_collection_name=os.environ.get(
                "CHUNKS_COLLECTION_NAME", defaults.chunks_collection_name
            ),
            documents_collection_name=os.environ.get(
                "DOCUMENTS_COLLECTION_NAME", defaults.documents_collection_name
            ),
            embedding_model=os.environ.get("EMBEDDING_MODEL", defaults.embedding_model),
            ollama_base_url=os.environ.get("OLLAMA_BASE_URL", defaults.ollama_base_url),
            distance_metric=os.environ.get("DISTANCE_METRIC", defaults.distance_metric),
            embedding_dimensions=_int("EMBEDDING_DIMENSIONS", defaults.embedding_dimensions),
        )

        return cls(
            pdf_directory=os.environ.get("PDF_DIRECTORY", cls.pdf_directory),
            ingest_on_startup=_bool("INGEST_ON_STARTUP", cls.ingest_on_startup),
            max_file_size_mb=_int("MAX_FILE_SIZE_MB", cls.max_file_size_mb),
            chunk_size_chars=_int("CHUNK_SIZE_CHARS", cls.chunk_size_chars),
            fail_fast=_bool("INGESTION_FAIL_FAST", cls.fail_fast),
            default_max_results=_int("SEARCH_MAX_RESULTS", cls.default_max_results),
            known_source_ids=_list("KNOWN_SOURCE_IDS", DEFAULT_KNOWN_SOURCE_IDS),
            store=store,
        )
