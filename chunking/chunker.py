"""
Paragraph Chunker - splits long text into bounded, paragraph-aligned chunks

Algorithm:
1. Split the text on blank lines into paragraphs
2. Strip every paragraph, drop the blank ones, keep their order
3. Pack paragraphs greedily into a chunk (joined by a blank line) while the
   chunk stays within the character budget
4. A paragraph that alone exceeds the budget becomes its own chunk; it is
   never split mid-paragraph

Usage:
    from chunking import ParagraphChunker, ChunkingConfig

    chunker = ParagraphChunker(ChunkingConfig(max_chars=1000))
    for text in chunker.chunk(markdown):
        ...
"""

import re
from typing import Iterator, Optional

from .models import ChunkingConfig, TextChunk

PARAGRAPH_SEPARATOR = "\n\n"

_PARAGRAPH_BREAK_RE = re.compile(r"\n\s*\n")


def split_paragraphs(text: str) -> list[str]:
    """Return the non-blank, stripped paragraphs of `text` in order."""
    if not text:
        return []
    return [p.strip() for p in _PARAGRAPH_BREAK_RE.split(text) if p.strip()]


def iter_chunks(text: str, max_chars: int = 1000) -> Iterator[str]:
    """
    Yield paragraph-aligned chunks of at most `max_chars` characters.

    Only a single paragraph longer than `max_chars` produces a longer chunk.
    Empty or whitespace-only input yields nothing.
    """
    current = ""
    for paragraph in split_paragraphs(text):
        if current and len(current) + len(PARAGRAPH_SEPARATOR) + len(paragraph) > max_chars:
            yield current
            current = ""
        current = f"{current}{PARAGRAPH_SEPARATOR}{paragraph}" if current else paragraph
    if current:
        yield current


class ParagraphChunker:
    """Chunks documents with a fixed character budget."""

    def __init__(self, config: Optional[ChunkingConfig] = None):
        self.config = config or ChunkingConfig()

    def chunk(self, text: str) -> Iterator[str]:
        return iter_chunks(text, self.config.max_chars)

    def chunk_document(
        self,
        text: str,
        title: str,
        metadata: Optional[dict] = None,
    ) -> list[TextChunk]:
        """
        Chunk a document and attach indices, a title hint and metadata.

        Args:
            text: Raw document text.
            title: Document title, used to build each chunk's title hint.
            metadata: Base metadata copied into every chunk.

        Returns:
            List of TextChunk objects in document order.
        """
        texts = list(self.chunk(text))
        total = len(texts)
        return [
            TextChunk(
                text=chunk_text,
                chunk_index=i,
                total_chunks=total,
                title_hint=f"{title} [chunk {i}]",
                metadata={**(metadata or {}), "chunk_index": i},
            )
            for i, chunk_text in enumerate(texts)
        ]
