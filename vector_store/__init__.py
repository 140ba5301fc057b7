"""
Vector Store Module - embeddings, persistence and similarity search

Stores documents with their vector embeddings in ChromaDB (one collection
per embedding family) and serves naive cosine scans as well as native
vector-index queries.

Quick Start:
    from vector_store import DocumentService, DocumentStore, SentenceTransformerEmbedder

    embedder = SentenceTransformerEmbedder()
    store = DocumentStore()
    service = DocumentService(store, embedder)

    record = service.create_document(DocumentCreate(title="Billing", content="..."))
    hits = store.scan_and_score(embedder.embed_query("refunds"), limit=5, threshold=0.7)
"""

__version__ = "1.0.0"

from .embedder import (
    EmbeddingProvider,
    GeminiEmbedder,
    SentenceTransformerEmbedder,
    TaskType,
)
from .exceptions import (
    CompletionError,
    NotFoundError,
    ProviderError,
    RAGError,
    RetrievalError,
    ValidationError,
)
from .models import (
    DocumentCreate,
    DocumentRecord,
    DocumentUpdate,
    ScoredRecord,
    StoreConfig,
    StoreStats,
)
from .search_backend import ChromaVectorSearch, VectorSearchBackend
from .service import DocumentService
from .similarity import cosine_similarity
from .store import DocumentStore

__all__ = [
    "__version__",
    "DocumentStore",
    "DocumentService",
    "EmbeddingProvider",
    "SentenceTransformerEmbedder",
    "GeminiEmbedder",
    "TaskType",
    "ChromaVectorSearch",
    "VectorSearchBackend",
    "cosine_similarity",
    "StoreConfig",
    "DocumentRecord",
    "DocumentCreate",
    "DocumentUpdate",
    "ScoredRecord",
    "StoreStats",
    "RAGError",
    "ProviderError",
    "CompletionError",
    "RetrievalError",
    "NotFoundError",
    "ValidationError",
]
