"""Tests for TF-IDF keyword retrieval."""

import math

import pytest

from rag_workbench.chunking import chunk_text
from rag_workbench.errors import IndexNotBuiltError, PreconditionError
from rag_workbench.keyword_index import KeywordIndex, smoothed_idf, tokenize

from .conftest import make_chunk


def test_tokenize_lowercases_and_strips_punctuation():
    assert tokenize("Hello, World! hello") == ["hello", "world", "hello"]
    assert tokenize("e-mail: x_y@z.io") == ["e", "mail", "x", "y", "z", "io"]
    assert tokenize("  ...  ") == []


def test_document_frequency_counts_each_chunk_once():
    index = KeywordIndex([make_chunk(0, "apple apple apple"), make_chunk(1, "apple pear")]).build()
    assert index.df == {"apple": 2, "pear": 1}


def test_idf_is_smoothed():
    index = KeywordIndex([make_chunk(0, "apple banana"), make_chunk(1, "apple cherry")]).build()
    assert index.idf["apple"] == pytest.approx(1.0)
    assert index.idf["banana"] == pytest.approx(math.log(3 / 2) + 1)
    assert smoothed_idf(10, 10) == pytest.approx(1.0)
    assert smoothed_idf(10, 1) > smoothed_idf(10, 5) > 0


def test_chunk_vectors_are_length_normalised(fruit_chunks):
    index = KeywordIndex(fruit_chunks).build()
    vec = index.vectors[0]
    assert vec["apple"] == pytest.approx(0.5 * index.idf["apple"])
    assert vec["banana"] == pytest.approx(0.5 * index.idf["banana"])
    assert index.norms[0] == pytest.approx(math.sqrt(vec["apple"] ** 2 + vec["banana"] ** 2))
    assert len(index.vectors) == len(index.norms) == len(fruit_chunks)


def test_apple_scenario_ties_keep_chunk_order():
    chunks = chunk_text("apple banana apple cherry", chunk_size_words=2, overlap_words=0)
    index = KeywordIndex(chunks).build()

    results = index.search("apple", top_k=5)

    assert [r.chunk.id for r in results] == [0, 1]
    assert results[0].score > 0
    assert results[0].score == results[1].score
    assert all(r.method == "keyword" for r in results)
    assert results[0].chunk is chunks[0]


def test_relevant_chunks_rank_first(topic_chunks):
    index = KeywordIndex(topic_chunks).build()
    results = index.search("interest rates", top_k=2)
    assert {r.chunk.id for r in results} == {1, 3}


def test_verbatim_chunk_scores_highest(topic_chunks):
    index = KeywordIndex(topic_chunks).build()
    results = index.search(topic_chunks[2].text, top_k=len(topic_chunks))
    assert results[0].chunk.id == 2
    assert results[0].score == pytest.approx(1.0)
    assert all(math.isfinite(r.score) for r in results)


def test_empty_query_scores_zero(topic_chunks):
    index = KeywordIndex(topic_chunks).build()
    results = index.search("?!", top_k=10)
    assert [r.chunk.id for r in results] == [0, 1, 2, 3]
    assert all(r.score == 0.0 for r in results)


def test_unknown_terms_do_not_contribute(topic_chunks):
    index = KeywordIndex(topic_chunks).build()
    assert index.query_vector("zebra cat") == index.query_vector("cat zebra")
    assert "zebra" not in index.query_vector("zebra cat")
    assert all(score == 0.0 for score in index.scores("zebra unicorn"))


def test_degenerate_chunk_has_floored_norm():
    index = KeywordIndex([make_chunk(0, "!!! ???"), make_chunk(1, "real words")]).build()
    assert index.norms[0] == 1e-9
    scores = index.scores("real")
    assert scores[0] == 0.0
    assert math.isfinite(scores[1]) and scores[1] > 0


def test_build_is_deterministic(topic_chunks):
    first = KeywordIndex(topic_chunks).build()
    second = KeywordIndex(topic_chunks).build()
    assert first.vectors == second.vectors
    assert first.norms == second.norms
    assert first.search("cat rates", 4) == second.search("cat rates", 4)


def test_rebuild_replaces_previous_statistics(topic_chunks, fruit_chunks):
    index = KeywordIndex(topic_chunks).build()
    index.build(fruit_chunks)
    assert "cat" not in index.idf
    assert len(index.vectors) == 2
    assert index.search("apple", 1)[0].chunk is fruit_chunks[0]


def test_top_k_truncates(topic_chunks):
    index = KeywordIndex(topic_chunks).build()
    assert len(index.search("cat", top_k=1)) == 1


def test_search_before_build_fails(topic_chunks):
    with pytest.raises(IndexNotBuiltError):
        KeywordIndex(topic_chunks).search("cat")


@pytest.mark.parametrize("top_k", [0, -3])
def test_non_positive_top_k_fails(topic_chunks, top_k):
    index = KeywordIndex(topic_chunks).build()
    with pytest.raises(PreconditionError):
        index.search("cat", top_k=top_k)


def test_empty_chunk_set():
    index = KeywordIndex([]).build()
    assert index.search("anything") == []
