"""
Retrieval component for the RAG pipeline.

Semantic search over ingested chunks, plus the citation format the chat
agent puts in its prompt.
"""

__version__ = "1.0.0"

from .citations import format_result, format_results
from .service import SemanticSearch

__all__ = [
    "__version__",
    "SemanticSearch",
    "format_result",
    "format_results",
]
