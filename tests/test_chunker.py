"""Tests for chunking.chunker - ParagraphChunker."""

import pydantic
import pytest

from chunking import (
    PARAGRAPH_SEPARATOR,
    ChunkingConfig,
    ParagraphChunker,
    iter_chunks,
    split_paragraphs,
)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

SAMPLE_TEXT = """# Billing

Invoices are created on the first day of every month.

Refunds are issued within 14 days.
They are paid to the original payment method.


Disputes go to the support team."""


@pytest.fixture
def chunker():
    return ParagraphChunker(ChunkingConfig(max_chars=60))


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------

class TestSplitParagraphs:
    def test_splits_on_blank_lines(self):
        assert split_paragraphs("a\n\nb\n\n\n\nc") == ["a", "b", "c"]

    def test_whitespace_only_lines_separate(self):
        assert split_paragraphs("a\n   \nb") == ["a", "b"]

    def test_strips_and_drops_blank(self):
        assert split_paragraphs("  a  \n\n   \n\n b ") == ["a", "b"]

    def test_single_newline_keeps_paragraph(self):
        assert split_paragraphs("line one\nline two") == ["line one\nline two"]

    def test_empty(self):
        assert split_paragraphs("") == []


class TestIterChunks:
    def test_empty_text_yields_nothing(self):
        assert list(iter_chunks("")) == []
        assert list(iter_chunks("  \n\n  \n")) == []

    def test_short_text_single_chunk(self):
        assert list(iter_chunks("Hello world.", max_chars=100)) == ["Hello world."]

    def test_packs_paragraphs_up_to_budget(self):
        text = "aaaa\n\nbbbb\n\ncccc"
        # "aaaa\n\nbbbb" is exactly 10 characters
        assert list(iter_chunks(text, max_chars=10)) == ["aaaa\n\nbbbb", "cccc"]

    def test_oversized_paragraph_is_own_chunk(self):
        big = "x" * 50
        text = f"a\n\n{big}\n\nb"
        assert list(iter_chunks(text, max_chars=10)) == ["a", big, "b"]

    def test_paragraph_never_split(self):
        big = "word " * 40
        chunks = list(iter_chunks(big, max_chars=20))
        assert chunks == [big.strip()]

    def test_budget_respected(self):
        chunks = list(iter_chunks(SAMPLE_TEXT, max_chars=60))
        paragraphs = split_paragraphs(SAMPLE_TEXT)
        for chunk in chunks:
            assert len(chunk) <= 60 or chunk in paragraphs

    def test_rejoin_reconstructs_paragraphs(self):
        chunks = list(iter_chunks(SAMPLE_TEXT, max_chars=60))
        assert PARAGRAPH_SEPARATOR.join(chunks) == PARAGRAPH_SEPARATOR.join(
            split_paragraphs(SAMPLE_TEXT)
        )

    def test_is_lazy(self):
        gen = iter_chunks("a\n\nb", max_chars=1)
        assert next(gen) == "a"
        assert next(gen) == "b"


class TestChunkDocument:
    def test_indices_and_totals(self, chunker):
        chunks = chunker.chunk_document(SAMPLE_TEXT, title="billing")
        assert len(chunks) > 1
        assert [c.chunk_index for c in chunks] == list(range(len(chunks)))
        assert all(c.total_chunks == len(chunks) for c in chunks)

    def test_title_hint(self, chunker):
        chunks = chunker.chunk_document(SAMPLE_TEXT, title="billing")
        assert chunks[0].title_hint == "billing [chunk 0]"
        assert chunks[1].title_hint == "billing [chunk 1]"

    def test_metadata_copied_with_index(self, chunker):
        base = {"feature": "billing", "images": []}
        chunks = chunker.chunk_document(SAMPLE_TEXT, title="billing", metadata=base)
        assert chunks[1].metadata == {"feature": "billing", "images": [], "chunk_index": 1}
        assert "chunk_index" not in base

    def test_empty_document(self, chunker):
        assert chunker.chunk_document("   ", title="empty") == []

    def test_to_dict(self, chunker):
        data = chunker.chunk_document("Hello.", title="t")[0].to_dict()
        assert data["text"] == "Hello."
        assert data["chunk_index"] == 0


class TestChunkingConfig:
    def test_default_budget(self):
        assert ChunkingConfig().max_chars == 1000

    def test_rejects_non_positive_budget(self):
        with pytest.raises(pydantic.ValidationError):
            ChunkingConfig(max_chars=0)
