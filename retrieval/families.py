"""
Wiring of embedding families.

A family is one embedding provider together with the collection that holds
its vectors. Vectors of different families are never compared: each family
has its own collection, dimension and services.

    local   SentenceTransformerEmbedder -> "document_vectors"  (768 dims)
    gemini  GeminiEmbedder              -> "gemini_embeddings" (3072 dims)
"""

import logging
from dataclasses import dataclass
from typing import Optional

import chromadb

from vector_store.embedder import EmbeddingProvider, GeminiEmbedder, SentenceTransformerEmbedder
from vector_store.exceptions import ValidationError
from vector_store.service import DocumentService
from vector_store.store import DocumentStore

from .config import RetrievalConfig
from .service import RetrievalService

logger = logging.getLogger(__name__)

FAMILIES = ("local", "gemini")


@dataclass
class EmbeddingFamily:
    name: str
    embedder: EmbeddingProvider
    store: DocumentStore
    documents: DocumentService
    retrieval: RetrievalService


def create_chroma_client(config: RetrievalConfig) -> chromadb.ClientAPI:
    if config.chroma_in_memory:
        return chromadb.EphemeralClient()
    return chromadb.PersistentClient(path=config.chroma_dir)


def create_embedder(config: RetrievalConfig, name: str) -> EmbeddingProvider:
    if name == "local":
        return SentenceTransformerEmbedder(
            model_name=config.local_model,
            dimension=config.local_dimension,
            device=config.local_device,
        )
    if name == "gemini":
        return GeminiEmbedder(
            api_key=config.gemini_api_key,
            endpoint=config.gemini_embedding_endpoint,
            model_name=config.gemini_embedding_model,
            dimension=config.gemini_dimension,
            timeout=config.request_timeout,
        )
    raise ValidationError(f"Unknown embedding family: {name} (expected one of {FAMILIES})")


def build_family(
    config: RetrievalConfig,
    name: str,
    chroma_client: Optional[chromadb.ClientAPI] = None,
    embedder: Optional[EmbeddingProvider] = None,
) -> EmbeddingFamily:
    """
    Build the embedder, store and services of one family.

    Args:
        config: Deployment configuration.
        name: "local" or "gemini".
        chroma_client: Shared ChromaDB client. Created from config if omitted.
        embedder: Pre-built provider (tests, or a model loaded elsewhere).
    """
    if name not in FAMILIES:
        raise ValidationError(f"Unknown embedding family: {name} (expected one of {FAMILIES})")

    store_config = config.local_store_config() if name == "local" else config.gemini_store_config()
    client = chroma_client or create_chroma_client(config)
    provider = embedder or create_embedder(config, name)
    store = DocumentStore(config=store_config, chroma_client=client)

    logger.info(
        f"Embedding family '{name}': model={provider.model_name}, "
        f"collection={store_config.collection_name}, search_mode={config.search_mode}"
    )
    return EmbeddingFamily(
        name=name,
        embedder=provider,
        store=store,
        documents=DocumentService(store, provider),
        retrieval=RetrievalService(config, store, provider),
    )
