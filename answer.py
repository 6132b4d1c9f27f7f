"""CLI entry point to answer a question using the RAG workbench."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from rag_workbench import LLMSettings, RetrievalSettings, Workbench, WorkbenchError, default_embedder
from rag_workbench.env import load_env
from rag_workbench.evaluation import check_citations
from rag_workbench.prompts import format_retrieval

logger = logging.getLogger("rag_workbench.cli")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Answer a question using the local RAG workbench.")
    parser.add_argument("question", help="Question to ask.")
    parser.add_argument(
        "--data-dir",
        default=str(Path.cwd() / "data"),
        help="Directory containing source documents (default: %(default)s).",
    )
    parser.add_argument(
        "--mode",
        choices=["keyword", "vector", "hybrid"],
        default=None,
        help="Retrieval type (default: RAG_RETRIEVAL_TYPE or keyword).",
    )
    parser.add_argument("--top-k", type=int, default=None, help="Number of chunks to retrieve.")
    parser.add_argument("--chunk-size", type=int, default=None, help="Words per chunk.")
    parser.add_argument("--overlap", type=int, default=None, help="Words of overlap between chunks.")
    parser.add_argument("--rrf-k", type=int, default=None, help="RRF constant for hybrid mode.")
    parser.add_argument(
        "--max-tokens",
        type=int,
        default=None,
        help="Maximum tokens to generate in the answer.",
    )
    parser.add_argument(
        "--retrieve-only",
        action="store_true",
        help="Print the retrieval trace and context without calling a model.",
    )
    parser.add_argument(
        "--log-level",
        default=os.getenv("RAG_LOG_LEVEL", "WARNING"),
        help="Logging level (default: %(default)s).",
    )
    return parser


def _settings_from_args(args: argparse.Namespace) -> RetrievalSettings:
    settings = RetrievalSettings.from_env()
    overrides = {
        "retrieval_type": args.mode,
        "top_k": args.top_k,
        "chunk_size_words": args.chunk_size,
        "overlap_words": args.overlap,
        "rrf_k": args.rrf_k,
    }
    return settings.replace(**{k: v for k, v in overrides.items() if v is not None})


async def run(args: argparse.Namespace) -> str:
    settings = _settings_from_args(args)
    embedder = default_embedder() if settings.uses_vectors else None
    workbench = Workbench.from_directory(args.data_dir, settings, embedder=embedder)

    def progress(done: int, total: int) -> None:
        logger.info("Vector embedding: %d/%d", done, total)

    await workbench.build_index(on_progress=progress)
    results = await workbench.retrieve(args.question)
    lines: List[str] = [format_retrieval(results), "", workbench.context()]
    if not args.retrieve_only:
        llm_settings = LLMSettings.from_env()
        if args.max_tokens is not None:
            llm_settings = llm_settings.replace(max_tokens=args.max_tokens)
        answer = await workbench.answer(args.question, llm_settings)
        lines += ["", answer.text, "", check_citations(answer.text, results).summary()]
    return "\n".join(lines)


def main(argv: Optional[List[str]] = None) -> int:
    load_env()
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")
    try:
        output = asyncio.run(run(args))
    except (WorkbenchError, FileNotFoundError) as exc:
        logger.error("%s", exc)
        print(f"error: {exc}", file=sys.stderr)
        return 1
    print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
