"""Tests for vector_store.store - DocumentStore."""

import time
import uuid

import pytest
from unittest.mock import patch

from vector_store.codec import to_chroma_metadata
from vector_store.exceptions import ValidationError
from vector_store.models import DocumentRecord, StoreConfig
from vector_store.search_backend import VECTOR_PATH
from vector_store.store import DocumentStore


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

QUERY = [1.0, 0.0]
VEC_A = [0.82, 0.5724]   # ~0.82 to QUERY
VEC_B = [0.0, 1.0]       # 0.0 to QUERY
VEC_C = [0.5, 0.866]     # ~0.5 to QUERY


@pytest.fixture
def store2(make_store):
    """Two-dimensional store for hand-checked similarities."""
    return make_store(2)


@pytest.fixture
def abc_store(store2, make_record):
    for title, vector in (("A", VEC_A), ("B", VEC_B), ("C", VEC_C)):
        store2.put(make_record(content=f"Document {title}", vector=vector, title=title))
    return store2


class FakeBackend:
    """Native backend returning canned hits."""

    def __init__(self, hits):
        self.hits = hits
        self.calls = []

    def search(self, index_name, vector_path, query_vector, limit, candidate_pool_size,
               filters=None):
        self.calls.append((index_name, vector_path, query_vector, limit, candidate_pool_size))
        self.filters = filters
        return [dict(h) for h in self.hits]


def _write_foreign(store, record):
    """Write a record straight into the collection, bypassing put's checks."""
    store._collection.upsert(
        ids=[record.document_id],
        embeddings=[record.vector_embedding],
        documents=[record.content],
        metadatas=[to_chroma_metadata(record)],
    )


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------

class TestPut:
    def test_round_trip(self, store, make_record):
        record = make_record(
            title="Billing",
            document_type="feature-doc",
            metadata={"feature": "billing", "images": [{"filename": "a.png", "path": "/x/a.png"}]},
            file_path="docs/billing/readme.md",
            file_size=120,
            mime_type="text/markdown",
        )
        store.put(record)
        loaded = store.get(record.document_id)

        assert loaded is not None
        assert loaded.content == record.content
        assert loaded.title == "Billing"
        assert loaded.document_type == "feature-doc"
        assert loaded.metadata == record.metadata
        assert loaded.file_path == "docs/billing/readme.md"
        assert loaded.file_size == 120
        assert loaded.mime_type == "text/markdown"
        assert loaded.embedding_model == "fake-embedder"
        assert loaded.vector_embedding == pytest.approx(record.vector_embedding)
        assert loaded.created_at is not None
        assert loaded.updated_at is not None

    def test_returns_stored_copy(self, store, make_record):
        record = make_record()
        stored = store.put(record)
        assert stored.created_at is not None
        assert record.created_at is None

    def test_upsert_replaces(self, store, make_record):
        record = make_record(content="first")
        store.put(record)
        store.put(record.model_copy(update={"content": "second"}))

        assert store.count() == 1
        assert store.get(record.document_id).content == "second"

    def test_upsert_keeps_created_at(self, store, make_record):
        record = make_record()
        first = store.put(record)
        time.sleep(0.01)
        second = store.put(record.model_copy(update={"content": "changed"}))

        assert second.created_at == first.created_at
        assert second.updated_at > first.updated_at

    def test_wrong_dimension(self, store, make_record):
        with pytest.raises(ValidationError, match="dimensions"):
            store.put(make_record(vector=[0.1, 0.2]))
        assert store.count() == 0

    def test_wrong_embedding_model(self, store, make_record):
        with pytest.raises(ValidationError, match="other-model"):
            store.put(make_record(embedding_model="other-model"))
        assert store.count() == 0

    def test_empty_content(self, store, make_record):
        with pytest.raises(ValidationError, match="empty content"):
            store.put(make_record(content="   "))

    def test_optional_fields_absent(self, store, make_record):
        record = make_record()
        store.put(record)
        loaded = store.get(record.document_id)
        assert loaded.file_path is None
        assert loaded.file_size is None
        assert loaded.metadata == {}


class TestGetDelete:
    def test_get_unknown(self, store):
        assert store.get("does-not-exist") is None

    def test_delete(self, store, make_record):
        record = make_record()
        store.put(record)
        assert store.delete(record.document_id) is True
        assert store.get(record.document_id) is None
        assert store.count() == 0

    def test_delete_unknown(self, store):
        assert store.delete("does-not-exist") is False

    def test_returned_record_is_independent(self, store, make_record):
        record = make_record(metadata={"feature": "billing"})
        store.put(record)
        loaded = store.get(record.document_id)
        loaded.metadata["feature"] = "changed"
        loaded.vector_embedding.clear()

        again = store.get(record.document_id)
        assert again.metadata == {"feature": "billing"}
        assert len(again.vector_embedding) == 8


class TestListing:
    def test_newest_first_with_total(self, store, make_record):
        ids = []
        for i in range(3):
            ids.append(store.put(make_record(content=f"doc {i}")).document_id)
            time.sleep(0.01)

        page, total = store.list(offset=0, limit=2)
        assert total == 3
        assert [r.document_id for r in page] == [ids[2], ids[1]]

        page, _ = store.list(offset=2, limit=2)
        assert [r.document_id for r in page] == [ids[0]]

    def test_filter_by_type(self, store, make_record):
        store.put(make_record(document_type="feature-doc"))
        store.put(make_record(document_type="feature-doc-chunk"))
        store.put(make_record(document_type="feature-doc-chunk"))

        page, total = store.list(document_type="feature-doc-chunk")
        assert total == 2
        assert all(r.document_type == "feature-doc-chunk" for r in page)

    def test_exists(self, store, make_record):
        store.put(make_record(title="billing", document_type="feature-doc"))
        assert store.exists("billing", "feature-doc")
        assert not store.exists("billing", "feature-doc-chunk")
        assert not store.exists("export", "feature-doc")

    def test_stats(self, store, make_record):
        store.put(make_record(document_type="feature-doc"))
        store.put(make_record(document_type="text"))
        stats = store.stats()
        assert stats.total_documents == 2
        assert stats.document_types == ["feature-doc", "text"]
        assert stats.embedding_models == ["fake-embedder"]

    def test_health(self, store):
        health = store.health_check()
        assert health["chromadb_ok"] is True
        assert health["documents_stored"] == 0


class TestScanAndScore:
    def test_threshold_keeps_single_hit(self, abc_store):
        hits = abc_store.scan_and_score(QUERY, limit=5, threshold=0.7)
        assert len(hits) == 1
        assert hits[0].record.title == "A"
        assert hits[0].similarity == pytest.approx(0.82, abs=1e-3)

    def test_sorted_descending(self, abc_store):
        hits = abc_store.scan_and_score(QUERY, limit=5, threshold=0.0)
        assert [h.record.title for h in hits] == ["A", "C", "B"]
        sims = [h.similarity for h in hits]
        assert sims == sorted(sims, reverse=True)

    def test_limit(self, abc_store):
        hits = abc_store.scan_and_score(QUERY, limit=2, threshold=0.0)
        assert [h.record.title for h in hits] == ["A", "C"]

    def test_document_type_filter(self, store2, make_record):
        store2.put(make_record(vector=VEC_A, title="doc", document_type="feature-doc"))
        store2.put(make_record(vector=VEC_A, title="chunk", document_type="feature-doc-chunk"))
        hits = store2.scan_and_score(QUERY, limit=5, threshold=0.0, document_type="feature-doc")
        assert [h.record.title for h in hits] == ["doc"]

    def test_ignores_vectors_of_other_models(self, store2, make_record):
        store2.put(make_record(vector=VEC_A, title="own"))
        _write_foreign(store2, make_record(vector=VEC_A, title="foreign", embedding_model="other-model"))

        hits = store2.scan_and_score(QUERY, limit=5, threshold=0.5)
        assert [(h.record.title, h.record.embedding_model) for h in hits] == [
            ("own", "fake-embedder")
        ]

    def test_skips_records_without_vector(self, store2):
        records = [
            DocumentRecord(content="no vector", vector_embedding=[]),
            DocumentRecord(content="with vector", vector_embedding=VEC_A),
        ]
        with patch.object(store2, "_load", return_value=records):
            hits = store2.scan_and_score(QUERY, limit=5, threshold=0.0)
        assert [h.record.content for h in hits] == ["with vector"]

    def test_empty_store(self, store2):
        assert store2.scan_and_score(QUERY, limit=5, threshold=0.0) == []


class TestNativeVectorSearch:
    def test_chroma_index(self, abc_store):
        hits = abc_store.native_vector_search(
            abc_store.index_name, QUERY, limit=5, candidate_pool_size=100, threshold=0.7
        )
        assert len(hits) == 1
        assert hits[0].record.title == "A"
        assert hits[0].similarity == pytest.approx(0.82, abs=1e-3)

    def test_chroma_index_no_threshold(self, abc_store):
        hits = abc_store.native_vector_search(
            abc_store.index_name, QUERY, limit=2, candidate_pool_size=100
        )
        assert [h.record.title for h in hits] == ["A", "C"]

    def test_ignores_vectors_of_other_models(self, store2, make_record):
        store2.put(make_record(vector=VEC_A, title="own"))
        _write_foreign(store2, make_record(vector=VEC_A, title="foreign", embedding_model="other-model"))

        hits = store2.native_vector_search(store2.index_name, QUERY, 5, 100, threshold=0.5)
        assert [h.record.title for h in hits] == ["own"]

    def test_document_type_filter(self, store2, make_record):
        store2.put(make_record(vector=VEC_A, title="doc", document_type="feature-doc"))
        store2.put(make_record(vector=VEC_A, title="chunk", document_type="feature-doc-chunk"))
        hits = store2.native_vector_search(
            store2.index_name, QUERY, 5, 100, threshold=0.0, document_type="feature-doc-chunk"
        )
        assert [h.record.title for h in hits] == ["chunk"]

    def test_zero_threshold_drops_negative_scores(self, store2, make_record):
        store2.put(make_record(vector=[-1.0, 0.0], title="opposite"))
        native = store2.native_vector_search(store2.index_name, QUERY, 5, 100, threshold=0.0)
        scan = store2.scan_and_score(QUERY, limit=5, threshold=0.0)
        assert native == scan == []

    def test_unknown_index(self, abc_store):
        with pytest.raises(ValidationError, match="Unknown vector index"):
            abc_store.native_vector_search("other_index", QUERY, limit=5, candidate_pool_size=10)

    def test_empty_collection(self, store2):
        assert store2.native_vector_search(store2.index_name, QUERY, 5, 100) == []

    def test_delegates_call_contract(self, chroma_client):
        backend = FakeBackend([])
        store = DocumentStore(
            config=StoreConfig(collection_name=f"native_{uuid.uuid4().hex[:8]}", embedding_dimension=2),
            chroma_client=chroma_client,
            search_backend=backend,
        )
        store.native_vector_search("vector_embedding_index", QUERY, limit=3, candidate_pool_size=50)
        assert backend.calls == [("vector_embedding_index", VECTOR_PATH, QUERY, 3, 50)]

    def test_entries_without_score_pass_through(self, chroma_client):
        backend = FakeBackend([
            {"document_id": "high", "content": "x", "score": 0.9},
            {"document_id": "low", "content": "y", "score": 0.2},
            {"document_id": "unscored", "content": "z"},
        ])
        store = DocumentStore(
            config=StoreConfig(collection_name=f"native_{uuid.uuid4().hex[:8]}", embedding_dimension=2),
            chroma_client=chroma_client,
            search_backend=backend,
        )
        hits = store.native_vector_search("vector_embedding_index", QUERY, 10, 100, threshold=0.5)

        assert [h.record.document_id for h in hits] == ["high", "unscored"]
        assert hits[0].similarity == 0.9
        assert hits[1].similarity is None

    def test_filters_passed_to_backend(self, chroma_client):
        backend = FakeBackend([])
        store = DocumentStore(
            config=StoreConfig(collection_name=f"native_{uuid.uuid4().hex[:8]}",
                               embedding_model="fake-embedder", embedding_dimension=2),
            chroma_client=chroma_client,
            search_backend=backend,
        )
        store.native_vector_search(store.index_name, QUERY, 3, 50, document_type="feature-doc")
        assert backend.filters == {
            "$and": [{"document_type": "feature-doc"}, {"embedding_model": "fake-embedder"}]
        }
