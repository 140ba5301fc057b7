from typing import Optional

from pydantic import BaseModel, Field, JsonValue


class SourceDocument(BaseModel):
    """One logical document yielded by a document source."""
    identifier: str = Field(
        ...,
        description="Stable name of the document (the feature folder name)",
    )
    text: str = Field(
        "",
        description="Raw text; empty if the source has no textual content",
    )
    metadata: dict[str, JsonValue] = Field(
        default_factory=dict,
        description="Provenance metadata (feature, markdown_file, images)",
    )
    file_path: Optional[str] = None
    file_size: Optional[int] = None
    mime_type: Optional[str] = None
    error: Optional[str] = Field(
        None,
        description="Why the source could not be read; such documents count as failed",
    )


class IngestStats(BaseModel):
    """Statistics from an ingestion run."""
    stored: int = Field(
        0,
        description="Units (documents or chunks) successfully stored",
    )
    skipped: int = Field(
        0,
        description="Sources skipped because they were already ingested",
    )
    empty: int = Field(
        0,
        description="Sources without textual content",
    )
    failed: int = Field(
        0,
        description="Units that failed to embed or store, and unreadable sources",
    )
    total_time_seconds: float = Field(
        0.0,
        description="Total ingestion time",
    )
