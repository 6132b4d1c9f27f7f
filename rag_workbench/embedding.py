"""
embedding.py
------------

Embedding providers for the :class:`~rag_workbench.vector_index.VectorIndex`.

The vector index only needs something that turns a piece of text into a
fixed-length numeric vector.  That can be a plain function, an object
with an ``embed`` method, or either of those returning an awaitable.
Two providers ship with the package:

- :class:`OpenAIEmbeddingModel` calls OpenAI's embedding endpoint (or
  any compatible server given ``OPENAI_BASE_URL``).
- :class:`HashingEmbeddingModel` uses scikit-learn's
  :class:`~sklearn.feature_extraction.text.HashingVectorizer`.  It needs
  no network, no fitting and gives the same vector for the same text in
  every process, which makes it a reasonable offline default and a
  convenient test double.

Providers are constructed explicitly by the caller and passed in; there
is no module-level model cache.
"""

from __future__ import annotations

import inspect
import logging
import os
from typing import Any, Awaitable, Callable, List, Optional, Sequence, Union

import numpy as np
from sklearn.feature_extraction.text import HashingVectorizer

try:
    from openai import AsyncOpenAI  # type: ignore
    _OPENAI_AVAILABLE = True
except ImportError:  # pragma: no cover
    AsyncOpenAI = None  # type: ignore
    _OPENAI_AVAILABLE = False

from .env import env_str, load_env
from .errors import PreconditionError

logger = logging.getLogger(__name__)

Vector = Union[Sequence[float], np.ndarray]
EmbedFunction = Callable[[str], Union[Vector, Awaitable[Vector]]]

DEFAULT_EMBEDDING_MODEL = "text-embedding-3-small"
DEFAULT_HASHING_FEATURES = 384


async def embed_with(embedder: Any, text: str) -> np.ndarray:
    """Run ``embedder`` on ``text`` and return a 1-D float array.

    ``embedder`` may be an object with an ``embed`` method or a bare
    callable; sync and async implementations are both accepted.
    Exceptions raised by the provider are not caught.
    """
    fn = getattr(embedder, "embed", embedder)
    if not callable(fn):
        raise PreconditionError(
            f"Embedding provider {embedder!r} is neither callable nor has an embed() method"
        )
    result = fn(text)
    if inspect.isawaitable(result):
        result = await result
    return np.asarray(result, dtype="float32").reshape(-1)


class HashingEmbeddingModel:
    """Stateless bag-of-words embedding via feature hashing.

    Parameters
    ----------
    n_features : int, optional
        Dimensionality of the produced vectors.
    ngram_range : tuple of int, optional
        Word n-gram range passed to the vectoriser.
    """

    def __init__(self, n_features: int = DEFAULT_HASHING_FEATURES, ngram_range=(1, 1)) -> None:
        self.n_features = n_features
        self.model_name = f"hashing-{n_features}"
        self._vectoriser = HashingVectorizer(
            n_features=n_features,
            ngram_range=ngram_range,
            alternate_sign=False,
            norm="l2",
            lowercase=True,
        )

    def embed(self, text: str) -> np.ndarray:
        matrix = self._vectoriser.transform([text])
        return matrix.toarray()[0].astype("float32")

    def embed_texts(self, texts: List[str]) -> List[List[float]]:
        if not texts:
            return []
        return self._vectoriser.transform(texts).toarray().tolist()


class OpenAIEmbeddingModel:
    """Compute embeddings with OpenAI's embedding API.

    Each call to :meth:`embed` sends one request.  Errors from the
    client (authentication, rate limiting, transport) propagate to the
    caller unchanged; the vector index treats them as a failed build.

    Parameters
    ----------
    model_name : str, optional
        Embedding model to request.  Defaults to ``text-embedding-3-small``.
    openai_api_key : str, optional
        Explicit API key.  If omitted, ``OPENAI_API_KEY`` is used.
    base_url : str, optional
        API base URL.  If omitted, ``OPENAI_BASE_URL`` or the public
        OpenAI endpoint is used.
    client : object, optional
        A preconfigured ``AsyncOpenAI``-compatible client.
    """

    def __init__(
        self,
        model_name: str = DEFAULT_EMBEDDING_MODEL,
        openai_api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        *,
        client: Any = None,
    ) -> None:
        self.model_name = model_name
        if client is not None:
            self._client = client
            return
        if not _OPENAI_AVAILABLE or AsyncOpenAI is None:
            raise RuntimeError("The openai package is not installed; cannot compute embeddings.")
        api_key = openai_api_key or os.getenv("OPENAI_API_KEY")
        if not api_key:
            raise PreconditionError(
                "OpenAI API key not found; set OPENAI_API_KEY or use HashingEmbeddingModel."
            )
        base_url = base_url or os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1/")
        self._client = AsyncOpenAI(api_key=api_key, base_url=base_url)

    async def embed(self, text: str) -> List[float]:
        response = await self._client.embeddings.create(model=self.model_name, input=text)
        return list(response.data[0].embedding)


def default_embedder() -> Union[OpenAIEmbeddingModel, HashingEmbeddingModel]:
    """Pick an embedding provider from the environment.

    Uses OpenAI when ``OPENAI_API_KEY`` is set, otherwise falls back to
    :class:`HashingEmbeddingModel` with a warning.
    """
    load_env()
    if _OPENAI_AVAILABLE and os.getenv("OPENAI_API_KEY"):
        model_name = env_str("RAG_EMBEDDING_MODEL", DEFAULT_EMBEDDING_MODEL)
        logger.info("Using OpenAI embeddings (%s)", model_name)
        return OpenAIEmbeddingModel(model_name=model_name)
    logger.warning("OpenAI API key not found; falling back to hashing embeddings.")
    return HashingEmbeddingModel()
