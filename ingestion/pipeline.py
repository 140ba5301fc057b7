"""
Ingestion pipeline: source documents -> (chunks) -> embeddings -> store.

Two modes:
    whole     one record per source, document_type "feature-doc"
    chunked   one record per paragraph chunk, document_type "feature-doc-chunk"

A source is skipped if a record with its title and document type already
exists. Unreadable sources and failed units are counted and never abort
the run.
"""

import logging
import time
import uuid
from typing import Callable, Iterable, Optional

from chunking import ParagraphChunker
from vector_store.embedder import EmbeddingProvider
from vector_store.exceptions import ValidationError
from vector_store.models import DocumentRecord
from vector_store.store import DocumentStore

from .models import IngestStats, SourceDocument

logger = logging.getLogger(__name__)

INGEST_MODES = ("whole", "chunked")
WHOLE_DOCUMENT_TYPE = "feature-doc"
CHUNK_DOCUMENT_TYPE = "feature-doc-chunk"


class IngestionPipeline:
    def __init__(
        self,
        store: DocumentStore,
        embedder: EmbeddingProvider,
        mode: str = "whole",
        chunker: Optional[ParagraphChunker] = None,
    ):
        if mode not in INGEST_MODES:
            raise ValidationError(f"Unknown ingest mode: {mode} (expected one of {INGEST_MODES})")
        self.store = store
        self.embedder = embedder
        self.mode = mode
        self.chunker = chunker or ParagraphChunker()

    @property
    def document_type(self) -> str:
        return CHUNK_DOCUMENT_TYPE if self.mode == "chunked" else WHOLE_DOCUMENT_TYPE

    def run(
        self,
        source: Iterable[SourceDocument],
        progress_callback: Optional[Callable[[str, str], None]] = None,
    ) -> IngestStats:
        """
        Ingest every document of a source.

        Args:
            source: Iterable of SourceDocument (e.g. FeatureFolderSource).
            progress_callback: Optional callback(identifier, status).

        Returns:
            IngestStats with stored, skipped, empty and failed counts.
        """
        start = time.time()
        stats = IngestStats()

        for document in source:
            status = self._ingest_document(document, stats)
            if progress_callback:
                progress_callback(document.identifier, status)

        stats.total_time_seconds = round(time.time() - start, 2)
        logger.info(
            f"Ingestion finished ({self.mode}): stored={stats.stored}, "
            f"skipped={stats.skipped}, empty={stats.empty}, failed={stats.failed}"
        )
        return stats

    def _ingest_document(self, document: SourceDocument, stats: IngestStats) -> str:
        if document.error:
            logger.error(f"Skipping unreadable source '{document.identifier}': {document.error}")
            stats.failed += 1
            return "failed"

        if self.store.exists(document.identifier, self.document_type):
            logger.info(f"Skipping '{document.identifier}': already ingested")
            stats.skipped += 1
            return "skipped"

        if not document.text.strip():
            logger.warning(f"No text found for '{document.identifier}'")
            stats.empty += 1
            return "empty"

        if self.mode == "whole":
            units = [(document.text, document.identifier, document.metadata)]
        else:
            units = [
                (chunk.text, chunk.title_hint, chunk.metadata)
                for chunk in self.chunker.chunk_document(
                    document.text, document.identifier, document.metadata
                )
            ]

        failures = 0
        for text, title_hint, metadata in units:
            if not self._store_unit(document, text, title_hint, metadata):
                failures += 1
        stats.stored += len(units) - failures
        stats.failed += failures
        return "failed" if failures else "stored"

    def _store_unit(
        self,
        document: SourceDocument,
        text: str,
        title_hint: str,
        metadata: dict,
    ) -> bool:
        try:
            vector = self.embedder.embed(text, title=title_hint)
            self.store.put(
                DocumentRecord(
                    document_id=str(uuid.uuid4()),
                    title=document.identifier,
                    content=text,
                    document_type=self.document_type,
                    vector_embedding=vector,
                    embedding_model=self.embedder.model_name,
                    metadata=metadata,
                    file_path=document.file_path,
                    file_size=document.file_size,
                    mime_type=document.mime_type,
                )
            )
        except Exception as e:
            logger.error(f"Failed to ingest '{title_hint}': {e}")
            return False
        logger.info(f"Stored '{title_hint}' ({len(text)} chars)")
        return True
