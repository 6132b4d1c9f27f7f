"""
settings.py
-----------

Validated configuration for retrieval and for the completion client.

Both settings classes check their fields when they are constructed, so
an invalid combination (an overlap as large as the chunk size, an
unknown retrieval type, an API mode without credentials) fails at the
point where it is introduced instead of at the first search.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from .chunking import DEFAULT_CHUNK_SIZE_WORDS, DEFAULT_OVERLAP_WORDS, validate_chunk_params
from .env import env_float, env_int, env_str, load_env
from .errors import PreconditionError, require_positive
from .models import RETRIEVAL_METHODS
from .rrf import DEFAULT_RRF_K

CITE_MODES = ("soft", "strict")
SAFE_MODES = ("on", "off")
LLM_MODES = ("explain", "api")

# Recipe files store settings under camelCase keys.
_RETRIEVAL_KEYS = {
    "chunkSizeWords": "chunk_size_words",
    "overlapWords": "overlap_words",
    "retrievalType": "retrieval_type",
    "rrfK": "rrf_k",
    "topK": "top_k",
    "candidateK": "candidate_k",
    "maxContextChars": "max_context_chars",
    "citeMode": "cite_mode",
    "safeMode": "safe_mode",
}


def _choice(name: str, value: str, allowed) -> None:
    if value not in allowed:
        raise PreconditionError(f"{name} must be one of {', '.join(allowed)}; got {value!r}")


@dataclass(frozen=True)
class RetrievalSettings:
    """How documents are chunked, indexed and retrieved.

    Attributes
    ----------
    chunk_size_words : int
        Words per chunk (default 220).
    overlap_words : int
        Words shared by neighbouring chunks (default 40).
    retrieval_type : str
        ``"keyword"``, ``"vector"`` or ``"hybrid"`` (default keyword).
    rrf_k : int
        RRF constant for hybrid retrieval (default 60).
    top_k : int
        Results returned per query (default 5).
    candidate_k : int
        Minimum depth pulled from each index before hybrid fusion; the
        actual depth is ``max(top_k, candidate_k)`` (default 10).
    max_context_chars : int
        Character budget of the assembled context (default 9000).
    cite_mode : str
        ``"soft"`` or ``"strict"`` citation instructions.
    safe_mode : str
        ``"on"`` marks retrieved context as untrusted in the prompt.
    """

    chunk_size_words: int = DEFAULT_CHUNK_SIZE_WORDS
    overlap_words: int = DEFAULT_OVERLAP_WORDS
    retrieval_type: str = "keyword"
    rrf_k: int = DEFAULT_RRF_K
    top_k: int = 5
    candidate_k: int = 10
    max_context_chars: int = 9000
    cite_mode: str = "soft"
    safe_mode: str = "on"

    def __post_init__(self) -> None:
        validate_chunk_params(self.chunk_size_words, self.overlap_words)
        _choice("retrieval_type", self.retrieval_type, RETRIEVAL_METHODS)
        require_positive("rrf_k", self.rrf_k)
        require_positive("top_k", self.top_k)
        require_positive("candidate_k", self.candidate_k)
        require_positive("max_context_chars", self.max_context_chars)
        _choice("cite_mode", self.cite_mode, CITE_MODES)
        _choice("safe_mode", self.safe_mode, SAFE_MODES)

    @property
    def uses_vectors(self) -> bool:
        return self.retrieval_type in ("vector", "hybrid")

    @property
    def candidate_depth(self) -> int:
        return max(self.top_k, self.candidate_k)

    def replace(self, **changes: Any) -> "RetrievalSettings":
        """Copy with ``changes`` applied; the copy is validated again."""
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return {camel: getattr(self, field) for camel, field in _RETRIEVAL_KEYS.items()}

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "RetrievalSettings":
        """Build settings from a camelCase or snake_case mapping.

        Missing keys take their defaults; unknown keys are rejected.
        """
        kwargs: Dict[str, Any] = {}
        field_names = set(_RETRIEVAL_KEYS.values())
        unknown = []
        for key, value in (data or {}).items():
            field = _RETRIEVAL_KEYS.get(key, key)
            if field not in field_names:
                unknown.append(key)
                continue
            kwargs[field] = value
        if unknown:
            raise PreconditionError(f"Unknown retrieval settings: {', '.join(sorted(unknown))}")
        return cls(**kwargs)

    @classmethod
    def from_env(cls) -> "RetrievalSettings":
        load_env()
        defaults = cls()
        return cls(
            chunk_size_words=env_int("RAG_CHUNK_SIZE_WORDS", defaults.chunk_size_words),
            overlap_words=env_int("RAG_OVERLAP_WORDS", defaults.overlap_words),
            retrieval_type=env_str("RAG_RETRIEVAL_TYPE", defaults.retrieval_type),
            rrf_k=env_int("RAG_RRF_K", defaults.rrf_k),
            top_k=env_int("RAG_TOP_K", defaults.top_k),
            candidate_k=env_int("RAG_CANDIDATE_K", defaults.candidate_k),
            max_context_chars=env_int("RAG_MAX_CONTEXT_CHARS", defaults.max_context_chars),
            cite_mode=env_str("RAG_CITE_MODE", defaults.cite_mode),
            safe_mode=env_str("RAG_SAFE_MODE", defaults.safe_mode),
        )


@dataclass(frozen=True)
class LLMSettings:
    """Connection and sampling settings for the completion client.

    ``mode="explain"`` never calls a model.  ``mode="api"`` talks to an
    OpenAI-compatible chat endpoint and needs ``endpoint``, ``model``
    and ``api_key``.
    """

    mode: str = "explain"
    endpoint: str = ""
    model: str = ""
    api_key: str = dataclasses.field(default="", repr=False)
    temperature: float = 0.7
    top_p: float = 0.9
    max_tokens: int = 512

    def __post_init__(self) -> None:
        _choice("mode", self.mode, LLM_MODES)
        if self.mode == "api":
            missing = [name for name in ("endpoint", "model", "api_key") if not getattr(self, name)]
            if missing:
                raise PreconditionError(f"Missing {'/'.join(missing)} for api mode")
        if not 0.0 <= self.temperature <= 2.0:
            raise PreconditionError(f"temperature must be in [0, 2], got {self.temperature}")
        if not 0.0 < self.top_p <= 1.0:
            raise PreconditionError(f"top_p must be in (0, 1], got {self.top_p}")
        require_positive("max_tokens", self.max_tokens)

    def replace(self, **changes: Any) -> "LLMSettings":
        return dataclasses.replace(self, **changes)

    @classmethod
    def from_env(cls) -> "LLMSettings":
        load_env()
        defaults = cls()
        return cls(
            mode=env_str("RAG_LLM_MODE", defaults.mode),
            endpoint=env_str("OPENAI_BASE_URL", defaults.endpoint),
            model=env_str("RAG_LLM_MODEL", defaults.model),
            api_key=env_str("OPENAI_API_KEY", defaults.api_key),
            temperature=env_float("RAG_LLM_TEMPERATURE", defaults.temperature),
            top_p=env_float("RAG_LLM_TOP_P", defaults.top_p),
            max_tokens=env_int("RAG_LLM_MAX_TOKENS", defaults.max_tokens),
        )
