"""
Data Models for the Chunking Pipeline

Defines:
1. ChunkingConfig - Character budget for a chunk
2. TextChunk - A single paragraph-aligned chunk with its position and metadata

Design Principles:
- Pydantic v2 for validation and serialization
- Chunks carry their index and a title hint used by providers that accept one
"""

from typing import Any

from pydantic import BaseModel, Field, JsonValue


class ChunkingConfig(BaseModel):
    """
    Configuration for the chunking pipeline.

    The default budget keeps each chunk comfortably below the remote
    embedding API's input limit.
    """
    max_chars: int = Field(
        1000,
        description="Maximum characters per chunk (single oversized paragraphs excepted)",
        ge=1,
    )


class TextChunk(BaseModel):
    """A chunk of a document, ready for embedding and storage."""
    text: str = Field(
        ...,
        description="The chunk text content",
        min_length=1,
    )
    chunk_index: int = Field(
        ...,
        description="Position of this chunk within the document (0-indexed)",
        ge=0,
    )
    total_chunks: int = Field(
        ...,
        description="Total number of chunks in the document",
        ge=1,
    )
    title_hint: str = Field(
        "",
        description="Title passed to the embedding provider, e.g. 'billing [chunk 2]'",
    )
    metadata: dict[str, JsonValue] = Field(
        default_factory=dict,
        description="Document metadata plus chunk_index",
    )

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")
