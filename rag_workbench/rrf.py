"""
rrf.py
------

Reciprocal Rank Fusion (RRF) combines ranked lists from several
retrieval systems.  Each item scores ``weight / (k + rank)`` in every
list it appears in (``rank`` is 1-based) and the contributions are
summed.  Only positions matter, never the raw scores, which is what
makes it safe to fuse TF-IDF cosine scores with embedding cosine scores
even though the two live on very different scales.

:func:`reciprocal_rank_fusion` works on plain identifier lists;
:func:`rrf_fuse` applies it to two lists of
:class:`~rag_workbench.models.RetrievalResult`.
"""

from __future__ import annotations

from typing import Dict, Hashable, List, Optional, Sequence, Tuple

from .errors import require_positive
from .models import HYBRID, Chunk, RetrievalResult

DEFAULT_RRF_K = 60


def reciprocal_rank_fusion(
    runs: Sequence[Sequence[Hashable]],
    k: int = DEFAULT_RRF_K,
    weights: Optional[Sequence[float]] = None,
) -> List[Tuple[Hashable, float]]:
    """Fuse multiple ranked lists using Reciprocal Rank Fusion (RRF).

    Parameters
    ----------
    runs : sequence of sequences
        One ranked list of identifiers per retrieval method, best
        item first.
    k : int, optional
        The RRF constant; a larger value flattens the gap between top
        and lower ranks.  60 is the usual choice.
    weights : sequence of floats, optional
        Per-run multipliers, one for each entry of ``runs``.  Runs are
        weighted equally when omitted.

    Returns
    -------
    list of (identifier, float)
        Identifiers and their RRF scores, sorted in descending order of
        score.  Equal scores keep the order in which the identifiers
        were first seen, scanning ``runs`` in order.
    """
    require_positive("rrf_k", k)
    if not runs:
        return []
    if weights is not None and len(weights) != len(runs):
        raise ValueError("Length of weights must match number of runs")
    if weights is None:
        weights = [1.0 for _ in runs]
    # dicts keep insertion order, so ties fall back to first appearance
    scores: Dict[Hashable, float] = {}
    for weight, run in zip(weights, runs):
        for rank, item_id in enumerate(run, start=1):
            scores[item_id] = scores.get(item_id, 0.0) + weight / (k + rank)
    return sorted(scores.items(), key=lambda x: x[1], reverse=True)


def rrf_fuse(
    list_a: Sequence[RetrievalResult],
    list_b: Sequence[RetrievalResult],
    top_k: int = 5,
    rrf_k: int = DEFAULT_RRF_K,
) -> List[RetrievalResult]:
    """Fuse two ranked result lists into one list tagged ``"hybrid"``.

    A chunk present in both lists is returned once, with both
    contributions added together.
    """
    require_positive("top_k", top_k)
    chunks: Dict[int, Chunk] = {}
    for item in list(list_a) + list(list_b):
        chunks.setdefault(item.chunk.id, item.chunk)
    fused = reciprocal_rank_fusion(
        [[item.chunk.id for item in list_a], [item.chunk.id for item in list_b]],
        k=rrf_k,
    )
    return [
        RetrievalResult(chunk=chunks[chunk_id], score=score, method=HYBRID)
        for chunk_id, score in fused[:top_k]
    ]
