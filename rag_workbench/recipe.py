"""
recipe.py
---------

Export and import of a workbench "recipe": the retrieval settings, a
summary of the loaded documents and the full chunk list, as JSON.

Embeddings are not stored.  After an import only the keyword index can
be rebuilt immediately; a vector index has to be embedded again.
"""

from __future__ import annotations

import json
import logging
import pathlib
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Sequence, Tuple, Union

from .documents import Document
from .errors import PreconditionError
from .models import Chunk
from .settings import RetrievalSettings

logger = logging.getLogger(__name__)

RECIPE_VERSION = "0.1"


def export_recipe(
    settings: RetrievalSettings,
    documents: Sequence[Document],
    chunks: Sequence[Chunk],
) -> Dict[str, Any]:
    return {
        "version": RECIPE_VERSION,
        "exportedAt": datetime.now(timezone.utc).isoformat(),
        "settings": settings.to_dict(),
        "docs": [{"name": d.name, "textLength": len(d.text)} for d in documents],
        "chunks": [c.to_dict() for c in chunks],
    }


def save_recipe(
    path: Union[str, pathlib.Path],
    settings: RetrievalSettings,
    documents: Sequence[Document],
    chunks: Sequence[Chunk],
) -> pathlib.Path:
    """Write the recipe to ``path`` as indented JSON and return the path."""
    out = pathlib.Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    with open(out, "w", encoding="utf-8") as fh:
        json.dump(export_recipe(settings, documents, chunks), fh, indent=2)
    logger.info("Saved recipe with %d chunks to %s", len(chunks), out)
    return out


def load_recipe(
    source: Union[str, pathlib.Path, Mapping[str, Any]],
) -> Tuple[RetrievalSettings, List[Chunk]]:
    """Read settings and chunks back from a recipe file or parsed mapping.

    Settings missing from the recipe take their defaults.  A recipe
    that is not a JSON object, or whose chunks lack an ``id`` or are not
    numbered ``0..n-1`` in order, raises :class:`PreconditionError`.
    """
    if isinstance(source, Mapping):
        data: Any = source
    else:
        with open(source, "r", encoding="utf-8") as fh:
            data = json.load(fh)
    if not isinstance(data, Mapping):
        raise PreconditionError("Recipe must be a JSON object")
    settings = RetrievalSettings.from_dict(data.get("settings") or {})
    try:
        chunks = [Chunk.from_dict(item) for item in data.get("chunks") or []]
    except (KeyError, TypeError, ValueError) as exc:
        raise PreconditionError(f"Invalid chunk in recipe: {exc}") from exc
    # fusion and citations key on the id, so ids must be 0..n-1 in order
    for position, chunk in enumerate(chunks):
        if chunk.id != position:
            raise PreconditionError(
                f"Invalid chunk ids in recipe: expected id {position}, got {chunk.id}"
            )
    return settings, chunks
