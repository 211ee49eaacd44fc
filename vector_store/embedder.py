"""
Ollama Embedder - Local embedding generation via Ollama API

Wraps the Ollama Python client to generate text embeddings locally. The same
embedder instance (and model) must be used for ingestion and for queries,
otherwise similarity scores are meaningless.

Design:
- Thin wrapper around ollama.Client.embed()
- Batch embedding for efficient ingestion
- Optional expected dimensionality, checked on every response
- Health check to verify Ollama is running and model is available

Usage:
    from vector_store.embedder import OllamaEmbedder

    embedder = OllamaEmbedder(model="nomic-embed-text")
    vector = embedder.embed("An example sentence")
    vectors = embedder.embed_batch(["Text 1", "Text 2"])
"""

import logging
from typing import Optional, Protocol

import ollama

from .exceptions import DimensionMismatchError, EmbeddingError

logger = logging.getLogger(__name__)


class EmbeddingProvider(Protocol):
    """Anything that turns text into fixed-length vectors."""

    def embed(self, text: str) -> list[float]:
        ...

    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        ...


class OllamaEmbedder:
    """
    Generates text embeddings using a local Ollama model.

    The embedder connects to a running Ollama instance and uses a specified
    embedding model to convert text into dense vector representations.
    """

    def __init__(
        self,
        model: str = "nomic-embed-text",
        base_url: str = "http://localhost:11434",
        expected_dimensions: Optional[int] = None,
    ):
        """
        Initialize the embedder.

        Args:
            model: Ollama model name for embeddings.
            base_url: Ollama API base URL.
            expected_dimensions: If set, every returned vector must have
                this length.
        """
        self.model = model
        self.base_url = base_url
        self.expected_dimensions = expected_dimensions
        self._client = ollama.Client(host=base_url)
        self._dimensions: Optional[int] = None

    @property
    def dimensions(self) -> Optional[int]:
        """Return the embedding dimensions (available after first embed call)."""
        return self._dimensions

    def embed(self, text: str) -> list[float]:
        """
        Generate an embedding for a single text.

        Raises:
            ValueError: If the text is empty.
            ConnectionError: If Ollama is not reachable.
            EmbeddingError: If embedding generation fails.
        """
        if not text or not text.strip():
            raise ValueError("Cannot embed empty text")

        try:
            response = self._client.embed(model=self.model, input=text)
        except ollama.ResponseError as e:
            raise EmbeddingError(
                f"Ollama embedding failed for model '{self.model}': {e}"
            ) from e
        except Exception as e:
            raise self._translate_error(e, "Embedding generation failed") from e

        embedding = list(response["embeddings"][0])
        self._record_dimensions(embedding)
        return embedding

    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """
        Generate embeddings for multiple texts in one request.

        Empty texts are not sent to Ollama; their slot in the result is an
        empty list so positions still line up with the input.

        Raises:
            ConnectionError: If Ollama is not reachable.
            EmbeddingError: If embedding generation fails.
        """
        if not texts:
            return []

        non_empty: list[tuple[int, str]] = [
            (i, t) for i, t in enumerate(texts) if t and t.strip()
        ]
        if not non_empty:
            return [[] for _ in texts]

        try:
            input_texts = [t for _, t in non_empty]
            response = self._client.embed(model=self.model, input=input_texts)
        except ollama.ResponseError as e:
            raise EmbeddingError(
                f"Ollama batch embedding failed for model '{self.model}': {e}"
            ) from e
        except Exception as e:
            raise self._translate_error(e, "Batch embedding failed") from e

        embeddings = response["embeddings"]
        if len(embeddings) != len(non_empty):
            raise EmbeddingError(
                f"Ollama returned {len(embeddings)} embeddings for "
                f"{len(non_empty)} texts"
            )

        result: list[list[float]] = [[] for _ in texts]
        for (orig_idx, _), embedding in zip(non_empty, embeddings):
            vector = list(embedding)
            self._record_dimensions(vector)
            result[orig_idx] = vector
        return result

    def health_check(self) -> dict[str, bool | str]:
        """
        Check if Ollama is running and the embedding model is available.

        Returns:
            Dict with 'healthy' (bool), 'ollama_running' (bool),
            'model_available' (bool), 'model' and 'error' (str, if any).
        """
        result = {
            "healthy": False,
            "ollama_running": False,
            "model_available": False,
            "model": self.model,
            "error": "",
        }

        try:
            models = self._client.list()
            result["ollama_running"] = True

            model_names = [m.model for m in models.models]
            # "nomic-embed-text" matches "nomic-embed-text:latest"
            result["model_available"] = any(
                m.startswith(self.model) for m in model_names
            )

            if not result["model_available"]:
                result["error"] = (
                    f"Model '{self.model}' not found. "
                    f"Available: {model_names}. "
                    f"Pull it with: ollama pull {self.model}"
                )
            else:
                result["healthy"] = True

        except Exception as e:
            logger.warning("Ollama health check failed: %s", e)
            result["error"] = f"Cannot connect to Ollama: {e}"

        return result

    def _record_dimensions(self, embedding: list[float]) -> None:
        if self.expected_dimensions and len(embedding) != self.expected_dimensions:
            raise DimensionMismatchError(self.expected_dimensions, len(embedding))
        self._dimensions = len(embedding)

    def _translate_error(self, error: Exception, message: str) -> Exception:
        if isinstance(error, ConnectionError) or "Connection" in type(error).__name__ \
                or "refused" in str(error).lower():
            return ConnectionError(
                f"Cannot connect to Ollama at {self.base_url}. "
                f"Is Ollama running? Start it with: ollama serve"
            )
        return EmbeddingError(f"{message}: {error}")
