"""Shared fixtures and fakes for the test suite."""

from types import SimpleNamespace
from typing import Dict, List, Sequence

import pytest

from rag_workbench import env as env_module
from rag_workbench.models import Chunk, ChunkMeta, RetrievalResult


class TableEmbedder:
    """Synchronous embedder returning fixed vectors looked up by text."""

    def __init__(self, table: Dict[str, Sequence[float]], default: Sequence[float] = (0.0, 0.0)):
        self.table = dict(table)
        self.default = list(default)
        self.calls: List[str] = []

    def embed(self, text: str) -> List[float]:
        self.calls.append(text)
        return list(self.table.get(text, self.default))


class AsyncTableEmbedder(TableEmbedder):
    async def embed(self, text: str) -> List[float]:
        return super().embed(text)


class FakeChatClient:
    """Stands in for ``AsyncOpenAI`` in completion tests."""

    def __init__(self, content="OK", finish_reason="stop", error=None):
        self.requests = []
        self._content = content
        self._finish_reason = finish_reason
        self._error = error
        self.closed = False
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._create))

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        self.closed = True

    async def _create(self, **kwargs):
        self.requests.append(kwargs)
        if self._error is not None:
            raise self._error
        message = SimpleNamespace(content=self._content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message, finish_reason=self._finish_reason)])


def make_chunk(chunk_id: int, text: str) -> Chunk:
    words = len(text.split())
    return Chunk(id=chunk_id, text=text, meta=ChunkMeta(start_word=0, end_word=words))


def make_result(chunk: Chunk, score: float = 0.0, method: str = "keyword") -> RetrievalResult:
    return RetrievalResult(chunk=chunk, score=score, method=method)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch):
    """Keep tests independent of a developer's .env file and shell variables."""
    monkeypatch.setattr(env_module, "_ENV_LOADED", True)
    for name in (
        "OPENAI_API_KEY",
        "OPENAI_BASE_URL",
        "RAG_EMBEDDING_MODEL",
        "RAG_CHUNK_SIZE_WORDS",
        "RAG_OVERLAP_WORDS",
        "RAG_RETRIEVAL_TYPE",
        "RAG_RRF_K",
        "RAG_TOP_K",
        "RAG_CANDIDATE_K",
        "RAG_MAX_CONTEXT_CHARS",
        "RAG_CITE_MODE",
        "RAG_SAFE_MODE",
        "RAG_LLM_MODE",
        "RAG_LLM_MODEL",
        "RAG_LLM_TEMPERATURE",
        "RAG_LLM_TOP_P",
        "RAG_LLM_MAX_TOKENS",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fruit_chunks():
    return [
        make_chunk(0, "apple banana"),
        make_chunk(1, "apple cherry"),
    ]


@pytest.fixture
def topic_chunks():
    return [
        make_chunk(0, "The cat sat on the mat and purred quietly."),
        make_chunk(1, "Stock markets fell sharply as interest rates rose."),
        make_chunk(2, "A dog chased the cat across the garden."),
        make_chunk(3, "Central banks raised interest rates again this quarter."),
    ]
