"""Tests for validated settings and .env loading."""

import os

import pytest

from rag_workbench import env as env_module
from rag_workbench.errors import PreconditionError
from rag_workbench.settings import LLMSettings, RetrievalSettings


def test_defaults():
    settings = RetrievalSettings()
    assert settings.chunk_size_words == 220
    assert settings.overlap_words == 40
    assert settings.retrieval_type == "keyword"
    assert settings.rrf_k == 60
    assert settings.candidate_depth == 10
    assert not settings.uses_vectors


@pytest.mark.parametrize(
    "kwargs",
    [
        {"overlap_words": 220},
        {"chunk_size_words": 0},
        {"retrieval_type": "semantic"},
        {"rrf_k": 0},
        {"top_k": -1},
        {"cite_mode": "loud"},
        {"safe_mode": "maybe"},
        {"max_context_chars": 0},
    ],
)
def test_invalid_values_are_rejected(kwargs):
    with pytest.raises(PreconditionError):
        RetrievalSettings(**kwargs)


def test_replace_revalidates():
    settings = RetrievalSettings()
    assert settings.replace(retrieval_type="hybrid").uses_vectors
    with pytest.raises(PreconditionError):
        settings.replace(chunk_size_words=30)


def test_from_dict_accepts_both_spellings():
    settings = RetrievalSettings.from_dict({"chunkSizeWords": 100, "overlap_words": 10, "rrfK": 30})
    assert (settings.chunk_size_words, settings.overlap_words, settings.rrf_k) == (100, 10, 30)


def test_from_dict_rejects_unknown_keys():
    with pytest.raises(PreconditionError, match="colour"):
        RetrievalSettings.from_dict({"colour": "blue"})


def test_to_dict_round_trips():
    settings = RetrievalSettings(chunk_size_words=50, overlap_words=5, retrieval_type="vector")
    data = settings.to_dict()
    assert data["chunkSizeWords"] == 50
    assert data["retrievalType"] == "vector"
    assert RetrievalSettings.from_dict(data) == settings


def test_from_env(monkeypatch):
    monkeypatch.setenv("RAG_CHUNK_SIZE_WORDS", "80")
    monkeypatch.setenv("RAG_OVERLAP_WORDS", "8")
    monkeypatch.setenv("RAG_RETRIEVAL_TYPE", "hybrid")
    settings = RetrievalSettings.from_env()
    assert settings.chunk_size_words == 80
    assert settings.overlap_words == 8
    assert settings.retrieval_type == "hybrid"


def test_from_env_rejects_garbage(monkeypatch):
    monkeypatch.setenv("RAG_TOP_K", "five")
    with pytest.raises(PreconditionError, match="RAG_TOP_K"):
        RetrievalSettings.from_env()


def test_llm_settings_api_mode_needs_credentials():
    with pytest.raises(PreconditionError, match="endpoint"):
        LLMSettings(mode="api", model="m", api_key="k")
    settings = LLMSettings(mode="api", endpoint="http://localhost/v1", model="m", api_key="k")
    assert "k" not in repr(settings)


def test_llm_settings_ranges():
    with pytest.raises(PreconditionError):
        LLMSettings(top_p=0)
    with pytest.raises(PreconditionError):
        LLMSettings(temperature=3)


def test_load_env_does_not_override(tmp_path, monkeypatch):
    env_file = tmp_path / ".env"
    env_file.write_text(
        "# comment\nRAG_TOP_K=7\nexport RAG_CITE_MODE='strict'\nRAG_RRF_K=\"11\"\nnot a pair\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("RAG_RRF_K", "99")

    assert env_module.load_env(env_file, force=True)

    assert os.environ["RAG_TOP_K"] == "7"
    assert os.environ["RAG_CITE_MODE"] == "strict"
    assert os.environ["RAG_RRF_K"] == "99"


def test_load_env_missing_file(tmp_path):
    assert env_module.load_env(tmp_path / "nope.env", force=True) is False
