"""
Native vector search - delegation to the document store's own index.

The index itself (HNSW inside ChromaDB) is not reimplemented here. This
module only defines the call contract the store uses and a ChromaDB-backed
implementation of it.
"""

from typing import Any, Optional, Protocol

import chromadb

from .codec import from_chroma
from .exceptions import ValidationError

VECTOR_PATH = "vector_embedding"


class VectorSearchBackend(Protocol):
    def search(
        self,
        index_name: str,
        vector_path: str,
        query_vector: list[float],
        limit: int,
        candidate_pool_size: int,
        filters: Optional[dict[str, Any]] = None,
    ) -> list[dict[str, Any]]:
        """
        Return records (as dicts) ordered best-first, each with an optional
        'score'. `filters` is a metadata filter the hits must match.
        """
        ...


class ChromaVectorSearch:
    """
    Runs vector queries against ChromaDB collections.

    Each index name maps to one collection; ChromaDB keeps a single vector
    index per collection over its embeddings.
    """

    def __init__(self, collections: dict[str, chromadb.Collection]):
        self._collections = collections

    def search(
        self,
        index_name: str,
        vector_path: str,
        query_vector: list[float],
        limit: int,
        candidate_pool_size: int,
        filters: Optional[dict[str, Any]] = None,
    ) -> list[dict[str, Any]]:
        if index_name not in self._collections:
            raise ValidationError(f"Unknown vector index: {index_name}")
        if vector_path != VECTOR_PATH:
            raise ValidationError(f"No vector index on path: {vector_path}")

        collection = self._collections[index_name]
        total = collection.count()
        if total == 0 or limit <= 0:
            return []

        raw = collection.query(
            query_embeddings=[query_vector],
            n_results=min(max(limit, candidate_pool_size), total),
            where=filters or None,
            include=["documents", "metadatas", "distances", "embeddings"],
        )
        if not raw["ids"] or not raw["ids"][0]:
            return []

        embeddings = raw.get("embeddings")
        hits: list[dict[str, Any]] = []
        for i, document_id in enumerate(raw["ids"][0]):
            record = from_chroma(
                document_id,
                raw["documents"][0][i],
                raw["metadatas"][0][i],
                embeddings[0][i] if embeddings is not None else None,
            )
            item = record.model_dump()
            # Cosine space: distance = 1 - similarity
            item["score"] = round(1.0 - float(raw["distances"][0][i]), 6)
            hits.append(item)

        return hits[:limit]
