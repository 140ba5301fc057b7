from typing import Any, Optional

from pydantic import BaseModel, Field

from vector_store.models import DocumentRecord, ScoredRecord, StoreStats


class SearchRequest(BaseModel):
    query: str = Field(..., min_length=1)
    limit: int = Field(10, ge=1, le=100)
    threshold: float = Field(0.7, ge=0.0, le=1.0)
    document_type: Optional[str] = None


class SearchResponse(BaseModel):
    query: str
    mode: str
    results: list[ScoredRecord] = Field(default_factory=list)
    total_results: int = 0


class EmbeddingRequest(BaseModel):
    text: str = Field(..., min_length=1)


class EmbeddingResponse(BaseModel):
    text: str
    embedding: list[float]
    embedding_size: int
    embedding_model: str


class DocumentListResponse(BaseModel):
    data: list[DocumentRecord] = Field(default_factory=list)
    total: int = 0
    offset: int = 0
    limit: int = 20


class DeleteResponse(BaseModel):
    document_id: str
    deleted: bool


class StatsResponse(StoreStats):
    collection: str = ""


class HealthResponse(BaseModel):
    status: str = "ok"
    families: dict[str, Any] = Field(default_factory=dict)
