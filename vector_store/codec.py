"""
Conversion between DocumentRecord and ChromaDB's storage shape.

ChromaDB only supports flat key-value metadata (no nested dicts, no lists,
no None values). Record fields are stored as flat keys and the open metadata
mapping is stored as one JSON string, so it round-trips exactly.
"""

import json
from datetime import datetime
from typing import Any, Optional

from .models import DocumentRecord

METADATA_JSON_KEY = "metadata_json"
_OPTIONAL_FIELDS = ("file_path", "file_size", "mime_type")


def to_chroma_metadata(record: DocumentRecord) -> dict[str, Any]:
    flat: dict[str, Any] = {
        "title": record.title,
        "document_type": record.document_type,
        "embedding_model": record.embedding_model,
        METADATA_JSON_KEY: json.dumps(record.metadata, ensure_ascii=False),
    }
    for name in _OPTIONAL_FIELDS:
        value = getattr(record, name)
        if value is not None:
            flat[name] = value
    if record.created_at is not None:
        flat["created_at"] = record.created_at.isoformat()
    if record.updated_at is not None:
        flat["updated_at"] = record.updated_at.isoformat()
    return flat


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if not value:
        return None
    return datetime.fromisoformat(str(value))


def to_vector(raw: Any) -> list[float]:
    """Normalize a ChromaDB embedding (list, numpy array or None) to floats."""
    if raw is None:
        return []
    return [float(x) for x in raw]


def from_chroma(
    document_id: str,
    document: Optional[str],
    metadata: Optional[dict[str, Any]],
    embedding: Any = None,
) -> DocumentRecord:
    meta = dict(metadata or {})
    extra = meta.get(METADATA_JSON_KEY)
    return DocumentRecord(
        document_id=document_id,
        title=meta.get("title", ""),
        content=document or "",
        document_type=meta.get("document_type", "text"),
        vector_embedding=to_vector(embedding),
        embedding_model=meta.get("embedding_model", ""),
        metadata=json.loads(extra) if extra else {},
        file_path=meta.get("file_path"),
        file_size=meta.get("file_size"),
        mime_type=meta.get("mime_type"),
        created_at=_parse_timestamp(meta.get("created_at")),
        updated_at=_parse_timestamp(meta.get("updated_at")),
    )


def records_from_get(raw: dict[str, Any]) -> list[DocumentRecord]:
    """Build records from the result of collection.get()."""
    ids = raw.get("ids") or []
    documents = raw.get("documents")
    metadatas = raw.get("metadatas")
    embeddings = raw.get("embeddings")

    records = []
    for i, document_id in enumerate(ids):
        records.append(from_chroma(
            document_id,
            documents[i] if documents is not None else None,
            metadatas[i] if metadatas is not None else None,
            embeddings[i] if embeddings is not None and len(embeddings) > i else None,
        ))
    return records
