"""
Ingestion component for RAG pipelines.

Reads feature documentation folders, optionally chunks them, embeds each
unit with an embedding family's provider and stores the result.
"""

__version__ = "1.0.0"

from .models import IngestStats, SourceDocument
from .pipeline import (
    CHUNK_DOCUMENT_TYPE,
    INGEST_MODES,
    WHOLE_DOCUMENT_TYPE,
    IngestionPipeline,
)
from .sources import FeatureFolderSource

__all__ = [
    "__version__",
    "IngestionPipeline",
    "IngestStats",
    "SourceDocument",
    "FeatureFolderSource",
    "INGEST_MODES",
    "WHOLE_DOCUMENT_TYPE",
    "CHUNK_DOCUMENT_TYPE",
]
