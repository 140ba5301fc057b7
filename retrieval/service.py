import logging
from typing import Optional

from vector_store.embedder import EmbeddingProvider
from vector_store.exceptions import ProviderError, RetrievalError, ValidationError
from vector_store.models import ScoredRecord
from vector_store.service import check_compatible
from vector_store.store import DocumentStore

from .config import SEARCH_MODES, RetrievalConfig

logger = logging.getLogger(__name__)

MAX_LIMIT = 100


def validate_search_params(query: str, limit: int, threshold: float) -> None:
    if not isinstance(query, str) or not query.strip():
        raise ValidationError("query must be a non-empty string")
    if isinstance(limit, bool) or not isinstance(limit, int) or not 1 <= limit <= MAX_LIMIT:
        raise ValidationError(f"limit must be an integer between 1 and {MAX_LIMIT}")
    if isinstance(threshold, bool) or not isinstance(threshold, (int, float)) or not 0.0 <= threshold <= 1.0:
        raise ValidationError("threshold must be a number between 0 and 1")


class RetrievalService:
    """
    Ranked similarity search for one embedding family.

    The search mode ("scan" or "native") is fixed when the service is built;
    there is no runtime fallback between the two.
    """

    def __init__(
        self,
        config: RetrievalConfig,
        store: DocumentStore,
        embedder: EmbeddingProvider,
    ):
        if config.search_mode not in SEARCH_MODES:
            raise ValidationError(
                f"Unsupported search mode: {config.search_mode} (expected one of {SEARCH_MODES})"
            )
        check_compatible(store, embedder)
        self.config = config
        self.store = store
        self.embedder = embedder
        self.search_mode = config.search_mode

    def find_similar(
        self,
        query_text: str,
        limit: int = 10,
        threshold: float = 0.7,
        document_type: Optional[str] = None,
    ) -> list[ScoredRecord]:
        """
        Embed the query and search with the configured mode.

        Returns:
            Records sorted by descending similarity; ties keep store order.

        Raises:
            ValidationError: For an empty query or out-of-range limit/threshold.
            RetrievalError: If the query embedding or the search fails.
        """
        if self.search_mode == "native":
            return self.search_native(query_text, limit, threshold, document_type)
        return self.search_scan(query_text, limit, threshold, document_type)

    def search_scan(
        self,
        query_text: str,
        limit: int = 10,
        threshold: float = 0.7,
        document_type: Optional[str] = None,
    ) -> list[ScoredRecord]:
        validate_search_params(query_text, limit, threshold)
        query_vector = self._embed_query(query_text)
        try:
            results = self.store.scan_and_score(
                query_vector,
                limit=limit,
                threshold=threshold,
                document_type=document_type,
            )
        except ValidationError:
            raise
        except Exception as e:
            logger.error(f"Scan search failed for query {query_text!r}: {e}")
            raise RetrievalError("Similarity scan failed", details=str(e)) from e
        logger.info(f"Scan search returned {len(results)} results for {query_text!r}")
        return _rank(results)

    def search_native(
        self,
        query_text: str,
        limit: int = 10,
        threshold: float = 0.7,
        document_type: Optional[str] = None,
    ) -> list[ScoredRecord]:
        validate_search_params(query_text, limit, threshold)
        query_vector = self._embed_query(query_text)
        try:
            results = self.store.native_vector_search(
                self.store.index_name,
                query_vector,
                limit=limit,
                candidate_pool_size=self.config.candidate_pool_size,
                threshold=threshold,
                document_type=document_type,
            )
        except ValidationError:
            raise
        except Exception as e:
            logger.error(f"Native vector search failed for query {query_text!r}: {e}")
            raise RetrievalError("Native vector search failed", details=str(e)) from e
        logger.info(f"Native search returned {len(results)} results for {query_text!r}")
        return _rank(results)

    def _embed_query(self, query_text: str) -> list[float]:
        try:
            return self.embedder.embed_query(query_text)
        except ProviderError as e:
            raise RetrievalError("Query embedding failed", details=str(e)) from e


def _rank(results: list[ScoredRecord]) -> list[ScoredRecord]:
    # sorted() is stable, so equal scores keep the store's order.
    return sorted(
        results,
        key=lambda s: s.similarity if s.similarity is not None else float("-inf"),
        reverse=True,
    )
