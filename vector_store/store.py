"""
Document Store - ChromaDB-backed storage for embedded documents

Manages DocumentRecords in one ChromaDB collection per embedding family:
- Write: upsert by document_id (the embedding must already be computed)
- Read: exact lookup, paginated listing, statistics
- Search: naive in-process cosine scan, or delegation to the native index

Design:
- Uses ChromaDB PersistentClient for on-disk storage
- Cosine space for the native index
- Upsert semantics: writing an existing document_id replaces it (last writer
  wins), created_at is kept
- The store never embeds; vector length must match the configured dimension

Usage:
    from vector_store import DocumentStore, StoreConfig

    store = DocumentStore(StoreConfig(collection_name="document_vectors"))
    store.put(record)
    hits = store.scan_and_score(query_vector, limit=5, threshold=0.7)
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Optional

import chromadb

from .codec import records_from_get, to_chroma_metadata
from .exceptions import ValidationError
from .models import DocumentRecord, ScoredRecord, StoreConfig, StoreStats
from .search_backend import VECTOR_PATH, ChromaVectorSearch, VectorSearchBackend
from .similarity import cosine_similarity

logger = logging.getLogger(__name__)

_ALL_FIELDS = ["embeddings", "documents", "metadatas"]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DocumentStore:
    """
    Vector store for one embedding family backed by a ChromaDB collection.

    Records handed out are fresh DocumentRecord instances; callers never hold
    a reference into the store.
    """

    def __init__(
        self,
        config: Optional[StoreConfig] = None,
        chroma_client: Optional[chromadb.ClientAPI] = None,
        search_backend: Optional[VectorSearchBackend] = None,
    ):
        """
        Initialize the document store.

        Args:
            config: Store configuration. Uses defaults if not provided.
            chroma_client: Optional pre-created ChromaDB client (for testing).
                           If not provided, a PersistentClient is created.
            search_backend: Native vector search implementation. Defaults to
                            the collection's own ChromaDB index.
        """
        self.config = config or StoreConfig()
        if chroma_client is not None:
            self._client = chroma_client
        else:
            self._client = chromadb.PersistentClient(
                path=self.config.persist_directory,
            )
        self._collection = self._client.get_or_create_collection(
            name=self.config.collection_name,
            metadata={"hnsw:space": self.config.distance_metric},
        )
        self._search_backend = search_backend or ChromaVectorSearch(
            {self.config.index_name: self._collection}
        )

    @property
    def index_name(self) -> str:
        return self.config.index_name

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def put(self, record: DocumentRecord) -> DocumentRecord:
        """
        Upsert a record by document_id and return the stored copy.

        Raises:
            ValidationError: If content is empty, or the vector length or
                             embedding model does not match the collection.
        """
        if not record.content or not record.content.strip():
            raise ValidationError("Cannot store a record with empty content")
        if len(record.vector_embedding) != self.config.embedding_dimension:
            raise ValidationError(
                f"Vector has {len(record.vector_embedding)} dimensions, "
                f"collection '{self.config.collection_name}' expects "
                f"{self.config.embedding_dimension}"
            )
        if record.embedding_model != self.config.embedding_model:
            raise ValidationError(
                f"Vector from model '{record.embedding_model}' cannot be stored in "
                f"collection '{self.config.collection_name}' of model "
                f"'{self.config.embedding_model}'"
            )

        now = _utcnow()
        existing = self.get(record.document_id)
        created_at = existing.created_at if existing and existing.created_at else now
        stored = record.model_copy(
            update={"created_at": created_at, "updated_at": now},
            deep=True,
        )

        self._collection.upsert(
            ids=[stored.document_id],
            embeddings=[stored.vector_embedding],
            documents=[stored.content],
            metadatas=[to_chroma_metadata(stored)],
        )
        logger.info(
            f"Stored document {stored.document_id} in {self.config.collection_name} "
            f"(embedding_size={len(stored.vector_embedding)})"
        )
        return stored

    def delete(self, document_id: str) -> bool:
        """
        Delete a record by id.

        Returns:
            True if a record existed and was removed, False otherwise.
        """
        found = self._collection.get(ids=[document_id], include=[])
        if not found["ids"]:
            return False
        self._collection.delete(ids=[document_id])
        logger.info(f"Deleted document {document_id} from {self.config.collection_name}")
        return True

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, document_id: str) -> Optional[DocumentRecord]:
        """Return the record with this id, or None if it does not exist."""
        raw = self._collection.get(ids=[document_id], include=_ALL_FIELDS)
        records = records_from_get(raw)
        return records[0] if records else None

    def exists(self, title: str, document_type: str) -> bool:
        """Whether any record with this title and type is stored."""
        raw = self._collection.get(
            where={"$and": [{"title": title}, {"document_type": document_type}]},
            limit=1,
            include=[],
        )
        return bool(raw["ids"])

    def list(
        self,
        document_type: Optional[str] = None,
        offset: int = 0,
        limit: int = 20,
    ) -> tuple[list[DocumentRecord], int]:
        """
        Paginated listing ordered by created_at, newest first.

        Returns:
            (records on the requested page, total number of matching records)
        """
        records = self._load(document_type)
        records.sort(
            key=lambda r: r.created_at or datetime.min.replace(tzinfo=timezone.utc),
            reverse=True,
        )
        return records[offset:offset + limit], len(records)

    def count(self) -> int:
        """Return the total number of records in the collection."""
        return self._collection.count()

    def stats(self) -> StoreStats:
        raw = self._collection.get(include=["metadatas"])
        types: set[str] = set()
        models: set[str] = set()
        for meta in raw["metadatas"] or []:
            if meta.get("document_type"):
                types.add(meta["document_type"])
            if meta.get("embedding_model"):
                models.add(meta["embedding_model"])
        return StoreStats(
            total_documents=len(raw["ids"]),
            document_types=sorted(types),
            embedding_models=sorted(models),
        )

    def health_check(self) -> dict[str, Any]:
        return {
            "chromadb_ok": True,
            "collection": self.config.collection_name,
            "documents_stored": self.count(),
            "embedding_dimension": self.config.embedding_dimension,
        }

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def scan_and_score(
        self,
        query_vector: list[float],
        limit: int,
        threshold: float,
        document_type: Optional[str] = None,
    ) -> list[ScoredRecord]:
        """
        Naive similarity search: score every stored vector in-process.

        Only records embedded by this collection's model are scored; records
        without a vector are skipped. Results with similarity >= threshold
        are sorted descending (stable, so ties keep the store's order) and
        cut to `limit`.
        """
        scored: list[ScoredRecord] = []
        for record in self._load(document_type, embedding_model=self.config.embedding_model):
            if not record.vector_embedding:
                continue
            similarity = cosine_similarity(query_vector, record.vector_embedding)
            logger.debug(f"Similarity {similarity:.4f} for {record.document_id}")
            if similarity >= threshold:
                scored.append(ScoredRecord(record=record, similarity=similarity))

        scored.sort(key=lambda s: s.similarity, reverse=True)
        return scored[:limit]

    def native_vector_search(
        self,
        index_name: str,
        query_vector: list[float],
        limit: int,
        candidate_pool_size: int,
        threshold: float = 0.0,
        document_type: Optional[str] = None,
    ) -> list[ScoredRecord]:
        """
        Similarity search through the store's native vector index.

        The index is queried for this collection's embedding model (and
        `document_type`, if given) only. Entries carrying a score below
        `threshold` are dropped; entries without a score pass through
        unfiltered.
        """
        raw_hits = self._search_backend.search(
            index_name,
            VECTOR_PATH,
            query_vector,
            limit,
            candidate_pool_size,
            filters=_where(document_type, self.config.embedding_model),
        )

        results: list[ScoredRecord] = []
        for hit in raw_hits:
            item = dict(hit)
            score = item.pop("score", None)
            if score is not None and score < threshold:
                continue
            results.append(ScoredRecord(
                record=DocumentRecord.model_validate(item),
                similarity=score,
            ))
        return results[:limit]

    def _load(
        self,
        document_type: Optional[str] = None,
        embedding_model: Optional[str] = None,
    ) -> list[DocumentRecord]:
        params: dict[str, Any] = {"include": _ALL_FIELDS}
        where = _where(document_type, embedding_model)
        if where:
            params["where"] = where
        return records_from_get(self._collection.get(**params))


def _where(
    document_type: Optional[str] = None,
    embedding_model: Optional[str] = None,
) -> Optional[dict[str, Any]]:
    """ChromaDB metadata filter; $and is only valid with two or more clauses."""
    clauses = []
    if document_type:
        clauses.append({"document_type": document_type})
    if embedding_model:
        clauses.append({"embedding_model": embedding_model})
    if not clauses:
        return None
    return clauses[0] if len(clauses) == 1 else {"$and": clauses}
