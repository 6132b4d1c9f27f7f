"""
vector_index.py
---------------

Dense retrieval: one embedding per chunk, scored against the query by
cosine similarity with a linear scan.

Embedding is the only slow, asynchronous step in the engine.  The index
embeds chunks one after another (never concurrently) so that progress
callbacks arrive in order, and it computes every norm itself rather
than trusting the provider to return unit vectors.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional, Sequence

import numpy as np

from .embedding import embed_with
from .errors import IndexNotBuiltError, PreconditionError, require_positive
from .models import VECTOR, Chunk, RetrievalResult
from .sparse import NORM_EPSILON

logger = logging.getLogger(__name__)

MAX_EMBED_CHARS = 2000

ProgressCallback = Callable[[int, int], Any]


class VectorIndex:
    """Embedding index over a chunk sequence.

    Parameters
    ----------
    chunks : sequence of :class:`Chunk`
        The chunks to index, shared with the caller and never copied.
    embedder : object, optional
        Embedding provider; see :func:`rag_workbench.embedding.embed_with`.
        May also be supplied to :meth:`build`.
    """

    def __init__(self, chunks: Sequence[Chunk], embedder: Any = None) -> None:
        self.chunks: List[Chunk] = list(chunks)
        self.embedder = embedder
        self.embeddings: np.ndarray = np.zeros((0, 0), dtype="float32")
        self.norms: np.ndarray = np.zeros(0, dtype="float32")
        self._built = False

    @property
    def is_built(self) -> bool:
        return self._built

    @property
    def dim(self) -> int:
        return int(self.embeddings.shape[1]) if self.embeddings.ndim == 2 else 0

    def _reset(self) -> None:
        self.embeddings = np.zeros((0, 0), dtype="float32")
        self.norms = np.zeros(0, dtype="float32")
        self._built = False

    async def build(
        self,
        embedder: Any = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> "VectorIndex":
        """Embed every chunk, in order, and precompute the norms.

        Chunk text is cut to ``MAX_EMBED_CHARS`` characters before it is
        embedded.  ``on_progress(done, total)`` is called after each
        chunk.  If the provider raises, the index is left unbuilt and
        the exception propagates; call :meth:`build` again to retry.
        """
        if embedder is not None:
            self.embedder = embedder
        if self.embedder is None:
            raise PreconditionError("VectorIndex.build requires an embedding provider")

        self._reset()
        total = len(self.chunks)
        rows: List[np.ndarray] = []
        try:
            for i, chunk in enumerate(self.chunks):
                rows.append(await embed_with(self.embedder, chunk.text[:MAX_EMBED_CHARS]))
                if on_progress is not None:
                    on_progress(i + 1, total)
            if rows:
                embeddings = np.vstack(rows)
            else:
                embeddings = np.zeros((0, 0), dtype="float32")
        except BaseException:
            logger.error("Vector index build failed after %d/%d chunks", len(rows), total)
            self._reset()
            raise

        norms = np.linalg.norm(embeddings.astype("float64"), axis=1) if total else np.zeros(0)
        self.embeddings = embeddings
        self.norms = np.maximum(norms, NORM_EPSILON)
        self._built = True
        logger.info("Built vector index over %d chunks (dim=%d)", total, self.dim)
        return self

    async def embed_query(self, query: str) -> np.ndarray:
        if not self._built:
            raise IndexNotBuiltError("VectorIndex")
        return await embed_with(self.embedder, query)

    async def scores(self, query: str) -> np.ndarray:
        """Cosine similarity of ``query`` against every chunk, in chunk order."""
        q = (await self.embed_query(query)).astype("float64")
        if not len(self.chunks):
            return np.zeros(0)
        qnorm = max(float(np.linalg.norm(q)), NORM_EPSILON)
        return (self.embeddings.astype("float64") @ q) / (qnorm * self.norms)

    async def search(self, query: str, top_k: int = 5) -> List[RetrievalResult]:
        """Return the ``top_k`` chunks closest to ``query``."""
        require_positive("top_k", top_k)
        sims = await self.scores(query)
        order = np.argsort(-sims, kind="stable")[:top_k]
        return [
            RetrievalResult(chunk=self.chunks[i], score=float(sims[i]), method=VECTOR)
            for i in order.tolist()
        ]
