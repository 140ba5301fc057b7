#!/usr/bin/env python3
"""
Ingest feature documentation folders into a vector store.

Each subfolder of the base path is one feature; its first markdown file is
the document content and its images are recorded in metadata.

Usage:
    rag-ingest --family local                          # whole documents
    rag-ingest --family gemini                         # paragraph chunks
    rag-ingest --family local --mode chunked --feature billing
"""

import argparse
import logging
from pathlib import Path

from dotenv import load_dotenv

from chunking import ChunkingConfig, ParagraphChunker
from logging_config import level_from_env, setup_logging
from retrieval.config import RetrievalConfig
from retrieval.families import FAMILIES, build_family
from vector_store.exceptions import RAGError

from .pipeline import INGEST_MODES, IngestionPipeline
from .sources import FeatureFolderSource

logger = logging.getLogger(__name__)

DEFAULT_MODES = {"local": "whole", "gemini": "chunked"}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Embed feature documentation folders and store them for retrieval",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --family local
  %(prog)s --family gemini --base-path docs/features
  %(prog)s --family local --mode chunked --feature billing --chunk-size 800
        """
    )
    parser.add_argument(
        "--family",
        choices=FAMILIES,
        default="local",
        help="Embedding family to ingest into (default: local)"
    )
    parser.add_argument(
        "--mode",
        choices=INGEST_MODES,
        default=None,
        help="Ingest whole documents or paragraph chunks "
             "(default: whole for local, chunked for gemini)"
    )
    parser.add_argument(
        "--feature",
        default=None,
        help="Only ingest this feature folder"
    )
    parser.add_argument(
        "--base-path",
        type=Path,
        default=Path("docs"),
        help="Folder containing one subfolder per feature (default: docs)"
    )
    parser.add_argument(
        "--chunk-size",
        type=int,
        default=1000,
        help="Maximum characters per chunk in chunked mode (default: 1000)"
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write log output to this file"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show debug output"
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    load_dotenv()
    args = build_parser().parse_args(argv)
    setup_logging(
        level=logging.DEBUG if args.verbose else level_from_env(),
        log_file=args.log_file,
    )

    mode = args.mode or DEFAULT_MODES[args.family]
    if args.chunk_size < 1:
        logger.error(f"Chunk size must be positive: {args.chunk_size}")
        return 1

    try:
        family = build_family(RetrievalConfig.from_env(), args.family)
        pipeline = IngestionPipeline(
            family.store,
            family.embedder,
            mode=mode,
            chunker=ParagraphChunker(ChunkingConfig(max_chars=args.chunk_size)),
        )
        stats = pipeline.run(FeatureFolderSource(args.base_path, feature=args.feature))
    except RAGError as e:
        logger.error(f"Ingestion failed: {e}")
        return 1

    print(f"\n  Family:    {args.family} ({mode})")
    print(f"  Stored:    {stats.stored}")
    print(f"  Skipped:   {stats.skipped}")
    print(f"  Empty:     {stats.empty}")
    print(f"  Failed:    {stats.failed}")
    print(f"  Time:      {stats.total_time_seconds}s")
    return 0 if stats.failed == 0 else 1


if __name__ == "__main__":
    raise SystemExit(main())
