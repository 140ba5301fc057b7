"""
MCP server exposing document search to LLM clients.

One tool, `searchDocuments(query, limit=10, threshold=0.7)`, runs a native
vector search over the local embedding family and returns
{query, results, count}. Failures come back as {error} instead of raising,
so the client sees a tool result either way.

Usage:
    rag-mcp                          # stdio transport
    rag-mcp --transport streamable-http
"""

import argparse
import logging
import os
import sys
from typing import Any

from dotenv import load_dotenv
from mcp.server.fastmcp import FastMCP

from logging_config import level_from_env, setup_logging
from vector_store.exceptions import RAGError

from .config import RetrievalConfig
from .families import build_family
from .service import RetrievalService

logger = logging.getLogger(__name__)

SERVER_NAME = "feature-docs"
TRANSPORTS = ("stdio", "sse", "streamable-http")


def search_documents(
    retrieval: RetrievalService,
    query: str,
    limit: int = 10,
    threshold: float = 0.7,
) -> dict[str, Any]:
    try:
        hits = retrieval.search_native(query, limit=limit, threshold=threshold)
    except RAGError as e:
        logger.error(f"Error in native vector search: {e}")
        return {"error": f"Failed to search documents (native vector search): {e}"}

    results = [
        {
            **hit.record.model_dump(mode="json", exclude={"vector_embedding"}),
            "similarity": hit.similarity,
        }
        for hit in hits
    ]
    logger.info(f"searchDocuments returned {len(results)} results for {query!r}")
    return {"query": query, "results": results, "count": len(results)}


def create_mcp_server(retrieval: RetrievalService) -> FastMCP:
    server = FastMCP(SERVER_NAME)

    @server.tool(name="searchDocuments")
    def search_documents_tool(query: str, limit: int = 10, threshold: float = 0.7) -> dict[str, Any]:
        """Semantic search over the feature documentation."""
        return search_documents(retrieval, query, limit=limit, threshold=threshold)

    return server


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    parser = argparse.ArgumentParser(description="Serve document search over MCP")
    parser.add_argument(
        "--transport",
        choices=TRANSPORTS,
        default=os.environ.get("MCP_TRANSPORT", "stdio"),
        help="MCP transport (default: $MCP_TRANSPORT or stdio)",
    )
    args = parser.parse_args(argv)
    if args.transport not in TRANSPORTS:
        parser.error(f"invalid MCP_TRANSPORT: {args.transport}")

    # stdout carries the protocol on the stdio transport
    setup_logging(level=level_from_env(), stream=sys.stderr)

    try:
        family = build_family(RetrievalConfig.from_env(), "local")
    except RAGError as e:
        logger.error(f"Cannot start MCP server: {e}")
        return 1

    create_mcp_server(family.retrieval).run(transport=args.transport)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
