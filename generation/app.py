import argparse

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException

from logging_config import level_from_env, setup_logging
from retrieval.app import build_families, http_error
from retrieval.config import RetrievalConfig
from retrieval.families import EmbeddingFamily
from vector_store.exceptions import RAGError

from .config import GenerationConfig
from .models import ChatRequest, ChatResponse, ChatSource
from .service import ChatService, CompletionService


def create_app(
    config: RetrievalConfig | None = None,
    generation_config: GenerationConfig | None = None,
    families: dict[str, EmbeddingFamily] | None = None,
    completion: CompletionService | None = None,
) -> FastAPI:
    """
    Build the chat API.

    /chat         context from the local sentence-transformer family
    /chat/gemini  context from the Gemini embedding family

    Run with: rag-chat-api (or uvicorn generation.app:create_app --factory)
    """
    if config is None or generation_config is None:
        load_dotenv()
    cfg = config or RetrievalConfig.from_env()
    gen_cfg = generation_config or GenerationConfig.from_env()
    all_families = families if families is not None else build_families(cfg)
    completion_service = completion or CompletionService(gen_cfg)

    chat_services = {
        name: ChatService(
            family.retrieval,
            completion_service,
            limit=gen_cfg.chat_limit,
            threshold=gen_cfg.chat_threshold,
            search_mode=gen_cfg.chat_search_mode,
        )
        for name, family in all_families.items()
    }

    app = FastAPI(
        title="Chat Service",
        version="1.0.0",
        description="Chat generation with retrieval-augmented context via Gemini.",
    )

    def _chat(family: str, request: ChatRequest) -> ChatResponse:
        if family not in chat_services:
            raise HTTPException(status_code=404, detail=f"Embedding family not configured: {family}")
        try:
            result = chat_services[family].chat(
                request.query,
                limit=request.limit,
                threshold=request.threshold,
                generation_config=request.generation_config,
            )
        except RAGError as exc:
            raise http_error(exc) from exc
        return ChatResponse(
            response=result.answer,
            sources=[
                ChatSource(
                    document_id=hit.record.document_id,
                    title=hit.record.title,
                    similarity=hit.similarity,
                )
                for hit in result.context
            ],
            metadata={
                "family": family,
                "search_mode": gen_cfg.chat_search_mode or cfg.search_mode,
                "context_documents": len(result.context),
            },
        )

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok", "families": sorted(chat_services)}

    @app.post("/chat", response_model=ChatResponse)
    def chat(request: ChatRequest) -> ChatResponse:
        return _chat("local", request)

    @app.post("/chat/gemini", response_model=ChatResponse)
    def chat_gemini(request: ChatRequest) -> ChatResponse:
        return _chat("gemini", request)

    return app


def main(argv: list[str] | None = None) -> None:
    """Load .env, configure logging and serve the chat API."""
    load_dotenv()
    parser = argparse.ArgumentParser(description="Serve the chat API")
    parser.add_argument("--host", default="0.0.0.0", help="Bind address (default: 0.0.0.0)")
    parser.add_argument("--port", type=int, default=8001, help="Port (default: 8001)")
    args = parser.parse_args(argv)

    setup_logging(level=level_from_env())
    uvicorn.run(create_app(), host=args.host, port=args.port)


if __name__ == "__main__":
    main()
