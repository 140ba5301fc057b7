"""
Embedding Providers - local sentence-transformer model and remote Gemini API

Both providers share one contract: embed(text, title=None) for documents and
embed_query(text) for search queries, each returning a fixed-length list of
floats. The provider object is created once at process start and handed to
every component that needs it.

Design:
- SentenceTransformerEmbedder: synchronous in-process model call (768 dims
  for all-mpnet-base-v2)
- GeminiEmbedder: one HTTP call per text to the embedContent endpoint with a
  RETRIEVAL_DOCUMENT / RETRIEVAL_QUERY task type (3072 dims)
- No retries: a failed call raises ProviderError and the caller decides

Usage:
    from vector_store.embedder import GeminiEmbedder, SentenceTransformerEmbedder

    local = SentenceTransformerEmbedder()
    vector = local.embed("Ein Beispieltext")

    remote = GeminiEmbedder(api_key="...")
    doc_vector = remote.embed("Chunk text", title="billing [chunk 0]")
    query_vector = remote.embed_query("How do refunds work?")
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Optional

from sentence_transformers import SentenceTransformer

from .exceptions import ProviderError, ValidationError
from .http_client import HTTPStatusError, post_json

logger = logging.getLogger(__name__)

DEFAULT_LOCAL_MODEL = "sentence-transformers/all-mpnet-base-v2"
DEFAULT_GEMINI_MODEL = "gemini-embedding-exp-03-07"
DEFAULT_GEMINI_EMBEDDING_ENDPOINT = (
    "https://generativelanguage.googleapis.com/v1beta/models/"
    "gemini-embedding-exp-03-07:embedContent"
)


class TaskType(str, Enum):
    """Retrieval intent sent to providers that distinguish them."""
    RETRIEVAL_DOCUMENT = "RETRIEVAL_DOCUMENT"
    RETRIEVAL_QUERY = "RETRIEVAL_QUERY"


def _require_text(text: str) -> None:
    if not isinstance(text, str) or not text.strip():
        raise ValidationError("Cannot embed empty text")


class EmbeddingProvider(ABC):
    """Turns text into a vector of fixed dimension."""

    model_name: str
    dimension: int

    @abstractmethod
    def embed(self, text: str, title: Optional[str] = None) -> list[float]:
        """Embed document text. `title` is a hint for providers that use one."""

    def embed_query(self, text: str) -> list[float]:
        """Embed a search query. Defaults to the document embedding."""
        return self.embed(text)

    @abstractmethod
    def health_check(self) -> dict[str, Any]:
        """Report whether the provider can currently produce embeddings."""


class SentenceTransformerEmbedder(EmbeddingProvider):
    """
    Generates embeddings with a local sentence-transformers model.

    The model is loaded once in the constructor. Pass `model` to inject an
    already loaded (or fake) model, or `lazy=True` to defer loading to the
    first embed call.
    """

    def __init__(
        self,
        model_name: str = DEFAULT_LOCAL_MODEL,
        dimension: int = 768,
        device: str = "cpu",
        model: Optional[Any] = None,
        lazy: bool = False,
    ):
        """
        Initialize the embedder.

        Args:
            model_name: HuggingFace model name.
            dimension: Expected vector length.
            device: Torch device ("cpu" or "cuda").
            model: Optional pre-loaded model exposing encode().
            lazy: Defer model loading until the first embed call.

        Raises:
            ProviderError: If the model cannot be loaded (non-lazy mode).
        """
        self.model_name = model_name
        self.dimension = dimension
        self.device = device
        self._model = model
        if self._model is None and not lazy:
            self._model = self._load_model()

    @property
    def is_loaded(self) -> bool:
        return self._model is not None

    def _load_model(self) -> Any:
        logger.info(f"Loading embedding model: {self.model_name} on {self.device}")
        try:
            model = SentenceTransformer(self.model_name, device=self.device)
        except Exception as e:
            logger.error(f"Failed to initialize sentence transformer {self.model_name}: {e}")
            raise ProviderError(
                "Cannot load sentence-transformer model",
                provider=self.model_name,
                details=str(e),
            ) from e
        logger.info(f"Model loaded: {self.model_name}")
        return model

    def embed(self, text: str, title: Optional[str] = None) -> list[float]:
        """
        Generate an embedding for a single text.

        Args:
            text: The text to embed.
            title: Ignored; local models have no title channel.

        Returns:
            List of floats representing the embedding vector.

        Raises:
            ValidationError: If the text is empty.
            ProviderError: If the model is unavailable or encoding fails.
        """
        _require_text(text)
        if self._model is None:
            self._model = self._load_model()

        try:
            embedding = self._model.encode(
                text,
                convert_to_numpy=True,
                show_progress_bar=False,
            )
        except Exception as e:
            logger.error(f"Failed to generate embedding with {self.model_name}: {e}")
            raise ProviderError(
                "Embedding generation failed",
                provider=self.model_name,
                details=str(e),
            ) from e
        return [float(x) for x in embedding]

    def health_check(self) -> dict[str, Any]:
        return {
            "healthy": self.is_loaded,
            "model_loaded": self.is_loaded,
            "model": self.model_name,
            "dimension": self.dimension,
            "error": "" if self.is_loaded else "Model not initialized",
        }


class GeminiEmbedder(EmbeddingProvider):
    """
    Generates embeddings through the Gemini embedContent HTTP API.

    One attempt per call. Failures are logged with the operation and the
    title hint, then raised as ProviderError.
    """

    def __init__(
        self,
        api_key: str,
        endpoint: str = DEFAULT_GEMINI_EMBEDDING_ENDPOINT,
        model_name: str = DEFAULT_GEMINI_MODEL,
        dimension: int = 3072,
        timeout: int = 60,
    ):
        self.api_key = api_key
        self.endpoint = endpoint
        self.model_name = model_name
        self.dimension = dimension
        self.timeout = timeout

    def embed(self, text: str, title: Optional[str] = None) -> list[float]:
        return self._embed(text, TaskType.RETRIEVAL_DOCUMENT, title)

    def embed_query(self, text: str) -> list[float]:
        return self._embed(text, TaskType.RETRIEVAL_QUERY)

    @staticmethod
    def build_payload(
        text: str,
        task_type: TaskType,
        title: Optional[str] = None,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "content": {"parts": [{"text": text}]},
            "taskType": task_type.value,
        }
        # The API only accepts a title for document embeddings.
        if task_type is TaskType.RETRIEVAL_DOCUMENT and title:
            payload["title"] = title
        return payload

    def _embed(
        self,
        text: str,
        task_type: TaskType,
        title: Optional[str] = None,
    ) -> list[float]:
        _require_text(text)
        if not self.api_key:
            raise ProviderError(
                "Gemini API key is not configured",
                provider=self.model_name,
            )

        payload = self.build_payload(text, task_type, title)
        operation = f"embed {task_type.value}"
        try:
            data = post_json(
                self.endpoint,
                payload,
                headers={"x-goog-api-key": self.api_key},
                timeout=self.timeout,
            )
        except HTTPStatusError as e:
            logger.error(
                f"Gemini embedding API error ({operation}, title={title!r}): "
                f"HTTP {e.status} {e.body}"
            )
            raise ProviderError(
                "Failed to get embedding from Gemini API",
                provider=self.model_name,
                details=f"HTTP {e.status}",
            ) from e
        except (ConnectionError, ValueError) as e:
            logger.error(f"Gemini embedding call failed ({operation}, title={title!r}): {e}")
            raise ProviderError(
                "Failed to get embedding from Gemini API",
                provider=self.model_name,
                details=str(e),
            ) from e

        values = None
        if isinstance(data, dict) and isinstance(data.get("embedding"), dict):
            values = data["embedding"].get("values")
        if not isinstance(values, list) or not values:
            logger.error(
                f"Invalid Gemini embedding response ({operation}, title={title!r}): {data}"
            )
            raise ProviderError(
                "Invalid Gemini API response",
                provider=self.model_name,
                details="missing embedding.values",
            )
        return [float(v) for v in values]

    def health_check(self) -> dict[str, Any]:
        configured = bool(self.api_key)
        return {
            "healthy": configured,
            "api_key_configured": configured,
            "model": self.model_name,
            "dimension": self.dimension,
            "error": "" if configured else "GEMINI_API_KEY not set",
        }
