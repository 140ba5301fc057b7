"""
Document lifecycle on top of a DocumentStore and an EmbeddingProvider.

The store never embeds; this service does. Creating a document embeds its
content, and an update that changes the content re-embeds it before the
record is written, so a stored vector always belongs to the stored text.
"""

import logging
from typing import Optional

from .embedder import EmbeddingProvider
from .exceptions import NotFoundError, ValidationError
from .models import DocumentCreate, DocumentRecord, DocumentUpdate, StoreStats
from .store import DocumentStore

logger = logging.getLogger(__name__)


def check_compatible(store: DocumentStore, embedder: EmbeddingProvider) -> None:
    """
    Raise ValidationError unless the embedder produces vectors for this store.

    A store holds vectors of one model and one dimension; queries and writes
    from any other provider are refused.
    """
    if store.config.embedding_dimension != embedder.dimension:
        raise ValidationError(
            f"Embedder '{embedder.model_name}' produces {embedder.dimension} "
            f"dimensions, store '{store.config.collection_name}' expects "
            f"{store.config.embedding_dimension}"
        )
    if store.config.embedding_model != embedder.model_name:
        raise ValidationError(
            f"Embedder '{embedder.model_name}' does not match model "
            f"'{store.config.embedding_model}' of store '{store.config.collection_name}'"
        )


class DocumentService:
    def __init__(self, store: DocumentStore, embedder: EmbeddingProvider):
        check_compatible(store, embedder)
        self.store = store
        self.embedder = embedder

    def create_document(self, data: DocumentCreate) -> DocumentRecord:
        """Embed and store a new document. ProviderError propagates."""
        vector = self.embedder.embed(data.content, title=data.title or None)
        fields = data.model_dump(exclude_none=True)
        record = DocumentRecord(
            **fields,
            vector_embedding=vector,
            embedding_model=self.embedder.model_name,
        )
        stored = self.store.put(record)
        logger.info(
            f"Document stored: {stored.document_id} "
            f"(model={stored.embedding_model}, embedding_size={len(vector)})"
        )
        return stored

    def get_document(self, document_id: str) -> DocumentRecord:
        record = self.store.get(document_id)
        if record is None:
            raise NotFoundError(document_id)
        return record

    def update_document(self, document_id: str, changes: DocumentUpdate) -> DocumentRecord:
        """
        Apply a partial update.

        If the content changes, the embedding is regenerated before the record
        is persisted. Metadata-only changes keep the existing vector.

        Raises:
            NotFoundError: If the document does not exist.
            ProviderError: If re-embedding fails (nothing is written).
        """
        existing = self.get_document(document_id)
        updates = changes.model_dump(exclude_unset=True, exclude_none=True)

        new_content = updates.get("content")
        if new_content is not None and new_content != existing.content:
            title = updates.get("title", existing.title)
            updates["vector_embedding"] = self.embedder.embed(new_content, title=title or None)
            updates["embedding_model"] = self.embedder.model_name
            logger.info(f"Content changed, re-embedded document {document_id}")

        updated = existing.model_copy(update=updates)
        return self.store.put(updated)

    def delete_document(self, document_id: str) -> bool:
        return self.store.delete(document_id)

    def list_documents(
        self,
        document_type: Optional[str] = None,
        offset: int = 0,
        limit: int = 20,
    ) -> tuple[list[DocumentRecord], int]:
        if offset < 0:
            raise ValidationError("offset must be >= 0")
        if limit < 1:
            raise ValidationError("limit must be >= 1")
        return self.store.list(document_type=document_type, offset=offset, limit=limit)

    def stats(self) -> StoreStats:
        return self.store.stats()

    def generate_embedding(self, text: str) -> list[float]:
        """Embed text without storing anything."""
        return self.embedder.embed(text)
