"""
Data Models for the Vector Store

Defines:
1. StoreConfig - Configuration for one ChromaDB collection (one embedding family)
2. DocumentRecord - The persisted unit of retrieval
3. ScoredRecord - A record paired with its similarity to a query
4. StoreStats - Aggregate statistics of a collection

Design Principles:
- Pydantic v2 for validation and serialization
- Metadata is an open JSON mapping (JsonValue) and round-trips exactly
- Records handed out by the store are fresh instances, never shared state
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, JsonValue

MetadataValue = JsonValue


class StoreConfig(BaseModel):
    """Configuration for one vector store collection."""
    collection_name: str = Field(
        "document_vectors",
        description="ChromaDB collection name",
    )
    persist_directory: str = Field(
        "./chroma_db",
        description="Directory for ChromaDB persistent storage",
    )
    embedding_model: str = Field(
        "sentence-transformers/all-mpnet-base-v2",
        description="Name of the model that produces this collection's vectors",
    )
    embedding_dimension: int = Field(
        768,
        description="Vector length every record in this collection must have",
        ge=1,
    )
    index_name: str = Field(
        "vector_embedding_index",
        description="Name under which the native vector index is addressed",
    )
    distance_metric: str = Field(
        "cosine",
        description="Distance metric for ChromaDB (cosine, l2, ip)",
    )


class DocumentRecord(BaseModel):
    """A document (or document chunk) with its embedding and provenance."""
    document_id: str = Field(
        default_factory=lambda: str(uuid.uuid4()),
        description="Globally unique identifier, immutable once assigned",
    )
    title: str = Field(
        "",
        description="Subject or name of the document",
    )
    content: str = Field(
        ...,
        description="Raw text of the full document or one chunk",
    )
    document_type: str = Field(
        "text",
        description="Discriminator, e.g. 'feature-doc' or 'feature-doc-chunk'",
    )
    vector_embedding: list[float] = Field(
        default_factory=list,
        description="Embedding vector of the content",
    )
    embedding_model: str = Field(
        "",
        description="Name/version of the provider that produced the vector",
    )
    metadata: dict[str, MetadataValue] = Field(
        default_factory=dict,
        description="Open key-value metadata (feature, chunk_index, images, ...)",
    )
    file_path: Optional[str] = Field(
        None,
        description="Path of the originating artifact",
    )
    file_size: Optional[int] = Field(
        None,
        description="Size of the originating artifact in bytes",
    )
    mime_type: Optional[str] = Field(
        None,
        description="MIME type of the originating artifact",
    )
    created_at: Optional[datetime] = Field(
        None,
        description="Set by the store on first write",
    )
    updated_at: Optional[datetime] = Field(
        None,
        description="Set by the store on every write",
    )


class ScoredRecord(BaseModel):
    """A record returned by a similarity search."""
    record: DocumentRecord
    similarity: Optional[float] = Field(
        None,
        description="Cosine similarity to the query (None if the backend gave no score)",
    )


class DocumentCreate(BaseModel):
    """Input for storing a new document; the embedding is computed on write."""
    document_id: Optional[str] = Field(None, min_length=1)
    title: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1)
    document_type: str = Field("text", max_length=100)
    metadata: dict[str, MetadataValue] = Field(default_factory=dict)
    file_path: Optional[str] = Field(None, max_length=500)
    file_size: Optional[int] = Field(None, ge=0)
    mime_type: Optional[str] = Field(None, max_length=100)


class DocumentUpdate(BaseModel):
    """Partial update. Only fields that are set are applied."""
    title: Optional[str] = Field(None, max_length=255)
    content: Optional[str] = Field(None, min_length=1)
    document_type: Optional[str] = Field(None, max_length=100)
    metadata: Optional[dict[str, MetadataValue]] = None
    file_path: Optional[str] = Field(None, max_length=500)
    file_size: Optional[int] = Field(None, ge=0)
    mime_type: Optional[str] = Field(None, max_length=100)


class StoreStats(BaseModel):
    """Aggregate statistics of one collection."""
    total_documents: int = 0
    document_types: list[str] = Field(default_factory=list)
    embedding_models: list[str] = Field(default_factory=list)
