from typing import Any, Optional

from pydantic import BaseModel, Field


class ChatRequest(BaseModel):
    query: str = Field(..., min_length=1)
    limit: int = Field(5, ge=1, le=10)
    threshold: float = Field(0.7, ge=0.0, le=1.0)
    generation_config: Optional[dict[str, Any]] = None


class ChatSource(BaseModel):
    document_id: str
    title: str = ""
    similarity: Optional[float] = None


class ChatResponse(BaseModel):
    response: str
    sources: list[ChatSource] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)
