"""
keyword_index.py
----------------

Lexical retrieval with TF-IDF weighted sparse vectors and cosine
similarity.

The index is built once from a fixed chunk sequence.  It is not
incrementally updatable: changing the chunks means calling
:meth:`KeywordIndex.build` again, which discards every statistic from
the previous build.
"""

from __future__ import annotations

import logging
import math
import re
from collections import Counter
from typing import Dict, List, Optional, Sequence

from .errors import IndexNotBuiltError, require_positive
from .models import KEYWORD, Chunk, RetrievalResult
from .sparse import NORM_EPSILON, SparseVector

logger = logging.getLogger(__name__)

_NON_ALNUM = re.compile(r"[^a-z0-9\s]")


def tokenize(text: str) -> List[str]:
    """Lowercase ``text``, blank out punctuation and split on whitespace.

    Duplicates are kept so the caller can count term frequencies.
    """
    return _NON_ALNUM.sub(" ", text.lower()).split()


def smoothed_idf(num_chunks: int, df: int) -> float:
    """``ln((N + 1) / (df + 1)) + 1``; positive for every observed term."""
    return math.log((num_chunks + 1) / (df + 1)) + 1


class KeywordIndex:
    """TF-IDF index over a chunk sequence.

    Parameters
    ----------
    chunks : sequence of :class:`Chunk`, optional
        The chunks to index.  They can also be handed to :meth:`build`.

    Attributes
    ----------
    df : dict
        Term to number of chunks containing the term.
    idf : dict
        Term to smoothed inverse document frequency.
    vectors : list of :class:`SparseVector`
        One TF-IDF vector per chunk, aligned with ``chunks``.
    norms : list of float
        L2 norm of each chunk vector, floored at ``1e-9``.
    """

    def __init__(self, chunks: Optional[Sequence[Chunk]] = None) -> None:
        self.chunks: List[Chunk] = list(chunks or [])
        self.df: Dict[str, int] = Counter()
        self.idf: Dict[str, float] = {}
        self.vectors: List[SparseVector] = []
        self.norms: List[float] = []
        self._built = False

    @property
    def is_built(self) -> bool:
        return self._built

    @property
    def vocabulary_size(self) -> int:
        return len(self.idf)

    def build(self, chunks: Optional[Sequence[Chunk]] = None) -> "KeywordIndex":
        """Compute document frequencies, IDF weights, vectors and norms."""
        if chunks is not None:
            self.chunks = list(chunks)
        self.df = Counter()
        self.idf = {}
        self.vectors = []
        self.norms = []

        chunk_tokens = [tokenize(chunk.text) for chunk in self.chunks]
        for tokens in chunk_tokens:
            # unique terms in first-seen order, so the vocabulary is reproducible
            self.df.update(dict.fromkeys(tokens, 1))

        num_chunks = len(self.chunks)
        for term, df in self.df.items():
            self.idf[term] = smoothed_idf(num_chunks, df)

        for tokens in chunk_tokens:
            vector = SparseVector.from_tokens(tokens, self.idf)
            self.vectors.append(vector)
            self.norms.append(vector.norm(NORM_EPSILON))

        self._built = True
        logger.info(
            "Built keyword index over %d chunks (vocabulary size %d)",
            num_chunks, len(self.idf),
        )
        return self

    def query_vector(self, query: str) -> SparseVector:
        """TF-IDF vector for ``query``; terms unknown to the index are dropped."""
        return SparseVector.from_tokens(tokenize(query), self.idf, drop_unknown=True)

    def scores(self, query: str) -> List[float]:
        """Cosine similarity of ``query`` against every chunk, in chunk order."""
        if not self._built:
            raise IndexNotBuiltError("KeywordIndex")
        qvec = self.query_vector(query)
        qnorm = qvec.norm(NORM_EPSILON)
        return [
            qvec.dot(dvec) / (qnorm * dnorm)
            for dvec, dnorm in zip(self.vectors, self.norms)
        ]

    def search(self, query: str, top_k: int = 5) -> List[RetrievalResult]:
        """Return the ``top_k`` chunks most similar to ``query``.

        An empty query (nothing left after tokenisation) is not an
        error: every chunk scores 0 and the first ``top_k`` chunks are
        returned in their original order.
        """
        require_positive("top_k", top_k)
        scores = self.scores(query)
        results = [
            RetrievalResult(chunk=chunk, score=score, method=KEYWORD)
            for chunk, score in zip(self.chunks, scores)
        ]
        # list.sort is stable, so equal scores keep chunk order
        results.sort(key=lambda r: r.score, reverse=True)
        logger.debug("Keyword search %r scored %d chunks", query, len(results))
        return results[:top_k]
