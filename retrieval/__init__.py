"""
Retrieval component for RAG pipelines.

Embeds a query with the family's provider and ranks stored documents by
cosine similarity, either by scanning in-process or through the store's
native vector index.
"""

__version__ = "1.0.0"

from .config import RetrievalConfig, SEARCH_MODES
from .families import EmbeddingFamily, FAMILIES, build_family
from .models import SearchRequest, SearchResponse
from .service import RetrievalService, validate_search_params

__all__ = [
    "__version__",
    "RetrievalConfig",
    "RetrievalService",
    "EmbeddingFamily",
    "build_family",
    "validate_search_params",
    "SearchRequest",
    "SearchResponse",
    "SEARCH_MODES",
    "FAMILIES",
]
