"""
Pytest fixtures for the RAG pipeline tests.
"""

import hashlib
import uuid
from typing import Any, Optional

import chromadb
import numpy as np
import pytest

from retrieval.config import RetrievalConfig
from retrieval.families import build_family
from vector_store.embedder import EmbeddingProvider
from vector_store.exceptions import ProviderError
from vector_store.models import DocumentRecord, StoreConfig
from vector_store.store import DocumentStore


class FakeEmbedder(EmbeddingProvider):
    """
    Deterministic embedder for tests.

    Texts listed in `vectors` map to that exact vector; any other text gets a
    pseudo-random vector seeded from its hash, so equal texts embed equally.
    Texts in `fail_on` raise ProviderError.
    """

    def __init__(
        self,
        dimension: int = 8,
        vectors: Optional[dict[str, list[float]]] = None,
        fail_on: tuple[str, ...] = (),
        model_name: str = "fake-embedder",
    ):
        self.dimension = dimension
        self.model_name = model_name
        self.vectors = dict(vectors or {})
        self.fail_on = set(fail_on)
        self.calls: list[tuple[str, Optional[str]]] = []

    def embed(self, text: str, title: Optional[str] = None) -> list[float]:
        self.calls.append((text, title))
        if text in self.fail_on:
            raise ProviderError("Fake embedding failure", provider=self.model_name)
        if text in self.vectors:
            return list(self.vectors[text])
        seed = int(hashlib.sha256(text.encode("utf-8")).hexdigest()[:8], 16)
        return [float(x) for x in np.random.default_rng(seed).standard_normal(self.dimension)]

    def health_check(self) -> dict[str, Any]:
        return {"healthy": True, "model": self.model_name, "dimension": self.dimension}


def unique_name(prefix: str = "test") -> str:
    return f"{prefix}_{uuid.uuid4().hex[:8]}"


@pytest.fixture
def chroma_client():
    """In-memory ChromaDB client."""
    return chromadb.EphemeralClient()


@pytest.fixture
def make_store(chroma_client):
    """Factory for stores on fresh collections of the given dimension."""
    def _make(dimension: int = 8) -> DocumentStore:
        config = StoreConfig(
            collection_name=unique_name(),
            embedding_model="fake-embedder",
            embedding_dimension=dimension,
        )
        return DocumentStore(config=config, chroma_client=chroma_client)
    return _make


@pytest.fixture
def store(make_store):
    return make_store(8)


@pytest.fixture
def embedder():
    return FakeEmbedder(dimension=8)


@pytest.fixture
def make_record():
    """Factory for records with an explicit vector."""
    def _make(
        content: str = "Refunds are issued within 14 days.",
        vector: Optional[list[float]] = None,
        dimension: int = 8,
        embedding_model: str = "fake-embedder",
        **fields: Any,
    ) -> DocumentRecord:
        return DocumentRecord(
            content=content,
            vector_embedding=vector if vector is not None else [0.1] * dimension,
            embedding_model=embedding_model,
            **fields,
        )
    return _make


@pytest.fixture
def retrieval_config():
    """Config with unique collections and small fake-embedder dimensions."""
    return RetrievalConfig(
        chroma_in_memory=True,
        local_dimension=8,
        local_collection=unique_name("local"),
        local_model="fake-local",
        gemini_dimension=8,
        gemini_embedding_model="fake-gemini",
        gemini_collection=unique_name("gemini"),
        gemini_api_key="test-key",
    )


@pytest.fixture
def families(retrieval_config, chroma_client):
    """Both embedding families wired to fake embedders."""
    return {
        name: build_family(
            retrieval_config,
            name,
            chroma_client=chroma_client,
            embedder=FakeEmbedder(dimension=8, model_name=f"fake-{name}"),
        )
        for name in ("local", "gemini")
    }
