"""
models.py
---------

Plain data containers shared by every part of the workbench.

:class:`Chunk` objects are created once by the chunker and then shared,
read-only, by both indexes and by every :class:`RetrievalResult` that
refers to them.  Nothing downstream copies or edits chunk text.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

KEYWORD = "keyword"
VECTOR = "vector"
HYBRID = "hybrid"
RETRIEVAL_METHODS = (KEYWORD, VECTOR, HYBRID)


@dataclass(frozen=True)
class ChunkMeta:
    """Half-open word range ``[start_word, end_word)`` in the source text."""

    start_word: int
    end_word: int

    def to_dict(self) -> Dict[str, int]:
        return {"startWord": self.start_word, "endWord": self.end_word}

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "ChunkMeta":
        return cls(
            start_word=int(payload.get("startWord", 0)),
            end_word=int(payload.get("endWord", 0)),
        )


@dataclass(frozen=True)
class Chunk:
    """A contiguous window of a document's words.

    Attributes
    ----------
    id : int
        0-based position in the chunk sequence that produced it.
    text : str
        The words of the window joined by single spaces.
    meta : ChunkMeta
        Where the window sits in the source text.
    """

    id: int
    text: str
    meta: ChunkMeta

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "text": self.text, "meta": self.meta.to_dict()}

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "Chunk":
        return cls(
            id=int(payload["id"]),
            text=str(payload.get("text", "")),
            meta=ChunkMeta.from_dict(payload.get("meta") or {}),
        )


@dataclass(frozen=True)
class RetrievalResult:
    """A chunk paired with its score and the method that produced it."""

    chunk: Chunk
    score: float
    method: str
