import argparse
from typing import Optional

import chromadb
import uvicorn
from dotenv import load_dotenv
from fastapi import APIRouter, FastAPI, HTTPException, Query

from logging_config import level_from_env, setup_logging
from vector_store.exceptions import NotFoundError, RAGError, ValidationError
from vector_store.models import DocumentCreate, DocumentRecord, DocumentUpdate

from .config import RetrievalConfig
from .families import FAMILIES, EmbeddingFamily, build_family, create_chroma_client
from .models import (
    DeleteResponse,
    DocumentListResponse,
    EmbeddingRequest,
    EmbeddingResponse,
    HealthResponse,
    SearchRequest,
    SearchResponse,
    StatsResponse,
)


def http_error(exc: Exception) -> HTTPException:
    """Translate a pipeline error into the HTTP status the client sees."""
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, ValidationError):
        return HTTPException(status_code=422, detail=str(exc))
    return HTTPException(status_code=500, detail=str(exc))


def build_families(
    config: RetrievalConfig,
    chroma_client: Optional[chromadb.ClientAPI] = None,
) -> dict[str, EmbeddingFamily]:
    client = chroma_client or create_chroma_client(config)
    return {name: build_family(config, name, chroma_client=client) for name in FAMILIES}


def documents_router(family: EmbeddingFamily) -> APIRouter:
    router = APIRouter()
    documents = family.documents
    retrieval = family.retrieval

    @router.get("", response_model=DocumentListResponse)
    def list_documents(
        document_type: Optional[str] = None,
        offset: int = Query(0, ge=0),
        limit: int = Query(20, ge=1, le=100),
    ) -> DocumentListResponse:
        try:
            records, total = documents.list_documents(document_type, offset, limit)
        except RAGError as exc:
            raise http_error(exc) from exc
        return DocumentListResponse(data=records, total=total, offset=offset, limit=limit)

    @router.post("", response_model=DocumentRecord, status_code=201)
    def create_document(request: DocumentCreate) -> DocumentRecord:
        try:
            return documents.create_document(request)
        except RAGError as exc:
            raise http_error(exc) from exc

    @router.get("/stats", response_model=StatsResponse)
    def stats() -> StatsResponse:
        try:
            result = documents.stats()
        except RAGError as exc:
            raise http_error(exc) from exc
        return StatsResponse(**result.model_dump(), collection=family.store.config.collection_name)

    @router.post("/search", response_model=SearchResponse)
    def search(request: SearchRequest) -> SearchResponse:
        try:
            results = retrieval.search_scan(
                request.query, request.limit, request.threshold, request.document_type
            )
        except RAGError as exc:
            raise http_error(exc) from exc
        return SearchResponse(
            query=request.query, mode="scan", results=results, total_results=len(results)
        )

    @router.post("/search-native", response_model=SearchResponse)
    def search_native(request: SearchRequest) -> SearchResponse:
        try:
            results = retrieval.search_native(
                request.query, request.limit, request.threshold, request.document_type
            )
        except RAGError as exc:
            raise http_error(exc) from exc
        return SearchResponse(
            query=request.query, mode="native", results=results, total_results=len(results)
        )

    @router.post("/embedding", response_model=EmbeddingResponse)
    def embedding(request: EmbeddingRequest) -> EmbeddingResponse:
        try:
            vector = documents.generate_embedding(request.text)
        except RAGError as exc:
            raise http_error(exc) from exc
        return EmbeddingResponse(
            text=request.text,
            embedding=vector,
            embedding_size=len(vector),
            embedding_model=family.embedder.model_name,
        )

    @router.get("/{document_id}", response_model=DocumentRecord)
    def get_document(document_id: str) -> DocumentRecord:
        try:
            return documents.get_document(document_id)
        except RAGError as exc:
            raise http_error(exc) from exc

    @router.put("/{document_id}", response_model=DocumentRecord)
    def update_document(document_id: str, request: DocumentUpdate) -> DocumentRecord:
        try:
            return documents.update_document(document_id, request)
        except RAGError as exc:
            raise http_error(exc) from exc

    @router.delete("/{document_id}", response_model=DeleteResponse)
    def delete_document(document_id: str) -> DeleteResponse:
        try:
            deleted = documents.delete_document(document_id)
        except RAGError as exc:
            raise http_error(exc) from exc
        if not deleted:
            raise http_error(NotFoundError(document_id))
        return DeleteResponse(document_id=document_id, deleted=True)

    return router


def create_app(
    config: RetrievalConfig | None = None,
    families: dict[str, EmbeddingFamily] | None = None,
) -> FastAPI:
    """
    Build the documents API.

    /documents/...         local sentence-transformer family
    /gemini/documents/...  Gemini embedding family

    Run with: rag-documents-api (or uvicorn retrieval.app:create_app --factory)
    """
    if config is None:
        load_dotenv()
    cfg = config or RetrievalConfig.from_env()
    all_families = families if families is not None else build_families(cfg)

    app = FastAPI(
        title="Document Vector Service",
        version="1.0.0",
        description="Document storage, embedding and similarity search API.",
    )

    @app.get("/health", response_model=HealthResponse)
    def health() -> HealthResponse:
        return HealthResponse(
            status="ok",
            families={
                name: {**family.store.health_check(), **family.embedder.health_check()}
                for name, family in all_families.items()
            },
        )

    if "local" in all_families:
        app.include_router(documents_router(all_families["local"]), prefix="/documents")
    if "gemini" in all_families:
        app.include_router(documents_router(all_families["gemini"]), prefix="/gemini/documents")

    return app


def main(argv: list[str] | None = None) -> None:
    """Load .env, configure logging and serve the documents API."""
    load_dotenv()
    parser = argparse.ArgumentParser(description="Serve the document vector API")
    parser.add_argument("--host", default="0.0.0.0", help="Bind address (default: 0.0.0.0)")
    parser.add_argument("--port", type=int, default=8000, help="Port (default: 8000)")
    args = parser.parse_args(argv)

    setup_logging(level=level_from_env())
    uvicorn.run(create_app(), host=args.host, port=args.port)


if __name__ == "__main__":
    main()
