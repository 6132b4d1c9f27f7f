"""
chunking.py
-----------

Split raw text into overlapping, fixed-size word windows.

Windows are measured in whitespace-separated words rather than
characters or model tokens, so the same settings behave the same way
regardless of which embedding backend is used later on.
"""

from __future__ import annotations

import logging
from typing import List

from .errors import PreconditionError, require_positive
from .models import Chunk, ChunkMeta

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE_WORDS = 220
DEFAULT_OVERLAP_WORDS = 40


def validate_chunk_params(chunk_size_words: int, overlap_words: int) -> None:
    """Raise :class:`PreconditionError` unless ``0 <= overlap < size``."""
    require_positive("chunk_size_words", chunk_size_words)
    if isinstance(overlap_words, bool) or not isinstance(overlap_words, int):
        raise PreconditionError(f"overlap_words must be an integer, got {overlap_words!r}")
    if overlap_words < 0 or overlap_words >= chunk_size_words:
        raise PreconditionError(
            f"overlap_words must be in [0, {chunk_size_words}), got {overlap_words}"
        )


def chunk_text(
    text: str,
    chunk_size_words: int = DEFAULT_CHUNK_SIZE_WORDS,
    overlap_words: int = DEFAULT_OVERLAP_WORDS,
) -> List[Chunk]:
    """Split text into overlapping windows of ``chunk_size_words`` words.

    Parameters
    ----------
    text : str
        The input text.  Any run of whitespace separates two words.
    chunk_size_words : int, optional
        Maximum number of words per chunk.
    overlap_words : int, optional
        Number of words shared by consecutive chunks.  Must be smaller
        than ``chunk_size_words`` or the window would never advance.

    Returns
    -------
    list of :class:`Chunk`
        Chunks with ids ``0..n-1`` in emission order.  Empty text gives
        an empty list.
    """
    validate_chunk_params(chunk_size_words, overlap_words)
    words = text.split()
    chunks: List[Chunk] = []
    start = 0
    while start < len(words):
        end = min(len(words), start + chunk_size_words)
        chunks.append(
            Chunk(
                id=len(chunks),
                text=" ".join(words[start:end]),
                meta=ChunkMeta(start_word=start, end_word=end),
            )
        )
        if end == len(words):
            break
        start = max(0, end - overlap_words)
    logger.debug(
        "Split %d words into %d chunks (size=%d, overlap=%d)",
        len(words), len(chunks), chunk_size_words, overlap_words,
    )
    return chunks
