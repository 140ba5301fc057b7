from dataclasses import dataclass
import os

from vector_store.embedder import (
    DEFAULT_GEMINI_EMBEDDING_ENDPOINT,
    DEFAULT_GEMINI_MODEL,
    DEFAULT_LOCAL_MODEL,
)
from vector_store.models import StoreConfig

SEARCH_MODES = ("scan", "native")


@dataclass
class RetrievalConfig:
    data_dir: str = "data/vector_store"
    chroma_in_memory: bool = False
    search_mode: str = "scan"
    candidate_pool_size: int = 100
    index_name: str = "vector_embedding_index"
    request_timeout: int = 60

    local_model: str = DEFAULT_LOCAL_MODEL
    local_dimension: int = 768
    local_collection: str = "document_vectors"
    local_device: str = "cpu"

    gemini_api_key: str = ""
    gemini_embedding_endpoint: str = DEFAULT_GEMINI_EMBEDDING_ENDPOINT
    gemini_embedding_model: str = DEFAULT_GEMINI_MODEL
    gemini_dimension: int = 3072
    gemini_collection: str = "gemini_embeddings"

    @classmethod
    def from_env(cls) -> "RetrievalConfig":
        def _int(name: str, default: int) -> int:
            value = os.environ.get(name)
            return int(value) if value else default

        return cls(
            data_dir=os.environ.get("RAG_DATA_DIR", cls.data_dir),
            chroma_in_memory=os.environ.get("RAG_CHROMA_IN_MEMORY") == "1",
            search_mode=os.environ.get("RAG_SEARCH_MODE", cls.search_mode),
            candidate_pool_size=_int("RAG_CANDIDATE_POOL_SIZE", cls.candidate_pool_size),
            index_name=os.environ.get("RAG_INDEX_NAME", cls.index_name),
            request_timeout=_int("RAG_REQUEST_TIMEOUT", cls.request_timeout),
            local_model=os.environ.get("RAG_LOCAL_MODEL", cls.local_model),
            local_dimension=_int("RAG_LOCAL_DIMENSION", cls.local_dimension),
            local_collection=os.environ.get("RAG_LOCAL_COLLECTION", cls.local_collection),
            local_device=os.environ.get("RAG_LOCAL_DEVICE", cls.local_device),
            gemini_api_key=os.environ.get("GEMINI_API_KEY", cls.gemini_api_key),
            gemini_embedding_endpoint=os.environ.get(
                "GEMINI_EMBEDDING_ENDPOINT", cls.gemini_embedding_endpoint
            ),
            gemini_embedding_model=os.environ.get(
                "GEMINI_EMBEDDING_MODEL", cls.gemini_embedding_model
            ),
            gemini_dimension=_int("GEMINI_EMBEDDING_DIMENSION", cls.gemini_dimension),
            gemini_collection=os.environ.get("GEMINI_COLLECTION", cls.gemini_collection),
        )

    @property
    def chroma_dir(self) -> str:
        return os.path.join(self.data_dir, "chroma")

    def local_store_config(self) -> StoreConfig:
        return StoreConfig(
            collection_name=self.local_collection,
            persist_directory=self.chroma_dir,
            embedding_model=self.local_model,
            embedding_dimension=self.local_dimension,
            index_name=self.index_name,
        )

    def gemini_store_config(self) -> StoreConfig:
        return StoreConfig(
            collection_name=self.gemini_collection,
            persist_directory=self.chroma_dir,
            embedding_model=self.gemini_embedding_model,
            embedding_dimension=self.gemini_dimension,
            index_name=self.index_name,
        )
