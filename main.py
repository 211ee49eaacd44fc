#!/usr/bin/env python3
"""
PDF ingestion pipeline - command line entry point.

Commands:
    python main.py ingest [--directory Data]
    python main.py search "How many credits?" [--document a.pdf] [--max-results 5]
    python main.py documents
    python main.py clear-all
    python main.py clear-document a.pdf
    python main.py cleanup-duplicates [--source-id PDFDirectorySource:Data]
    python main.py health
    python main.py serve [--host 127.0.0.1] [--port 8000]

Configuration comes from environment variables (and a .env file), see
ingestion/config.py.
"""

import argparse
import json
import logging
import sys

from dotenv import load_dotenv

from ingestion.config import IngestionConfig
from ingestion.exceptions import IngestionError
from ingestion.logging_config import setup_logging
from ingestion.pipeline import Pipeline, build_pipeline
from retrieval.citations import format_results
from vector_store.exceptions import VectorStoreError

logger = logging.getLogger("ingestion.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Ingest PDFs into ChromaDB and search them semantically",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    commands = parser.add_subparsers(dest="command", required=True)

    ingest = commands.add_parser("ingest", help="Reconcile the store with a PDF directory")
    ingest.add_argument("--directory", help="PDF directory (default: PDF_DIRECTORY)")

    search = commands.add_parser("search", help="Semantic search over ingested chunks")
    search.add_argument("query")
    search.add_argument("--document", help="Only search chunks of this filename")
    search.add_argument("--max-results", type=int, default=None)

    commands.add_parser("documents", help="List PDFs in the configured directory")
    commands.add_parser("clear-all", help="Delete all documents and chunks")

    clear_document = commands.add_parser("clear-document", help="Delete one document's data")
    clear_document.add_argument("document_id")

    duplicates = commands.add_parser("cleanup-duplicates", help="Collapse duplicate records")
    duplicates.add_argument("--source-id", default=None)

    commands.add_parser("health", help="Check ChromaDB and Ollama")

    serve = commands.add_parser("serve", help="Run the HTTP admin/search API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    return parser


def run(args: argparse.Namespace, pipeline: Pipeline) -> int:
    if args.command == "ingest":
        report = pipeline.ingestor.ingest(pipeline.pdf_source(args.directory))
        print(json.dumps(report.model_dump(), indent=2))
        return 0 if report.succeeded else 1

    if args.command == "search":
        chunks = pipeline.search.search(args.query, args.document, args.max_results)
        if not chunks:
            print("No results.")
        for line in format_results(chunks):
            print(line)
        return 0

    if args.command == "documents":
        for name in pipeline.documents.get_available_documents():
            print(name)
        return 0

    if args.command == "clear-all":
        stats = pipeline.cleaner.clear_all_data()
    elif args.command == "clear-document":
        stats = pipeline.cleaner.clear_document(args.document_id)
    elif args.command == "cleanup-duplicates":
        stats = pipeline.cleaner.cleanup_duplicates(args.source_id)
    elif args.command == "health":
        health = pipeline.store.health_check()
        embedder_health = pipeline.embedder.health_check()
        print(json.dumps({**health, "embedder": embedder_health}, indent=2))
        return 0 if embedder_health.get("healthy") else 1
    else:
        raise ValueError(f"Unknown command: {args.command}")

    print(json.dumps(stats.model_dump(), indent=2))
    return 0


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)
    setup_logging(level=logging.DEBUG if args.verbose else logging.INFO)
    config = IngestionConfig.from_env()

    if args.command == "serve":
        import uvicorn

        from ingestion.app import create_app

        uvicorn.run(create_app(config), host=args.host, port=args.port)
        return 0

    pipeline = build_pipeline(config)
    try:
        return run(args, pipeline)
    except (IngestionError, VectorStoreError, ConnectionError) as e:
        logger.error("%s failed: %s", args.command, e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
