"""CLI utility to chunk a data directory and write the result as a recipe file."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from rag_workbench import RetrievalSettings, Workbench, WorkbenchError
from rag_workbench.env import load_env

logger = logging.getLogger("rag_workbench.cli")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Chunk documents and export a recipe.json.")
    parser.add_argument(
        "--data-dir",
        default=str(Path.cwd() / "data"),
        help="Directory containing source documents (default: %(default)s).",
    )
    parser.add_argument(
        "--output",
        default="recipe.json",
        help="Destination file (default: %(default)s).",
    )
    parser.add_argument("--chunk-size", type=int, default=None, help="Words per chunk.")
    parser.add_argument("--overlap", type=int, default=None, help="Words of overlap between chunks.")
    parser.add_argument(
        "--log-level",
        default=os.getenv("RAG_LOG_LEVEL", "WARNING"),
        help="Logging level (default: %(default)s).",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    load_env()
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")
    try:
        settings = RetrievalSettings.from_env()
        overrides = {"chunk_size_words": args.chunk_size, "overlap_words": args.overlap}
        settings = settings.replace(**{k: v for k, v in overrides.items() if v is not None})
        workbench = Workbench.from_directory(args.data_dir, settings)
        path = workbench.save_recipe(args.output)
    except (WorkbenchError, FileNotFoundError) as exc:
        logger.error("%s", exc)
        print(f"error: {exc}", file=sys.stderr)
        return 1
    print(str(path))
    return 0


if __name__ == "__main__":
    sys.exit(main())
