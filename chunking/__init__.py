"""
Chunking Module - paragraph-aligned chunking for embedding

Splits long documents into chunks of bounded size whose boundaries fall on
blank-line paragraph breaks.

Quick Start:
    from chunking import ParagraphChunker, ChunkingConfig

    chunker = ParagraphChunker(ChunkingConfig(max_chars=1000))
    chunks = chunker.chunk_document(markdown, title="billing")
"""

__version__ = "1.0.0"

from .chunker import PARAGRAPH_SEPARATOR, ParagraphChunker, iter_chunks, split_paragraphs
from .models import ChunkingConfig, TextChunk

__all__ = [
    "__version__",
    "ParagraphChunker",
    "ChunkingConfig",
    "TextChunk",
    "iter_chunks",
    "split_paragraphs",
    "PARAGRAPH_SEPARATOR",
]
