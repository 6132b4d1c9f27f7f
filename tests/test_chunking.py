"""Tests for the word-window chunker."""

import pytest

from rag_workbench.chunking import chunk_text
from rag_workbench.errors import PreconditionError


def _words(n):
    return " ".join(f"w{i}" for i in range(n))


def test_empty_text_gives_no_chunks():
    assert chunk_text("", 10, 2) == []
    assert chunk_text("   \n\t ", 10, 2) == []


def test_scenario_two_word_chunks():
    chunks = chunk_text("apple banana apple cherry", chunk_size_words=2, overlap_words=0)

    assert [(c.id, c.text) for c in chunks] == [(0, "apple banana"), (1, "apple cherry")]
    assert (chunks[0].meta.start_word, chunks[0].meta.end_word) == (0, 2)
    assert (chunks[1].meta.start_word, chunks[1].meta.end_word) == (2, 4)


def test_whitespace_is_normalised():
    chunks = chunk_text("alpha\n\n beta\tgamma", 5, 0)
    assert len(chunks) == 1
    assert chunks[0].text == "alpha beta gamma"


def test_short_text_fits_in_one_chunk():
    chunks = chunk_text(_words(3), 10, 4)
    assert len(chunks) == 1
    assert (chunks[0].meta.start_word, chunks[0].meta.end_word) == (0, 3)


def test_last_pair_may_overlap_less():
    chunks = chunk_text(_words(10), 4, 1)
    assert [(c.meta.start_word, c.meta.end_word) for c in chunks] == [(0, 4), (3, 7), (6, 10)]


@pytest.mark.parametrize(
    "n_words,size,overlap",
    [(1, 1, 0), (50, 7, 0), (50, 7, 3), (50, 7, 6), (100, 20, 5), (23, 5, 4), (220, 220, 40)],
)
def test_chunks_cover_text_with_exact_overlap(n_words, size, overlap):
    text = _words(n_words)
    words = text.split()
    chunks = chunk_text(text, size, overlap)

    assert [c.id for c in chunks] == list(range(len(chunks)))

    covered = set()
    for c in chunks:
        assert c.text == " ".join(words[c.meta.start_word:c.meta.end_word])
        assert 0 < c.meta.end_word - c.meta.start_word <= size
        covered.update(range(c.meta.start_word, c.meta.end_word))
    assert covered == set(range(n_words))

    for prev, nxt in zip(chunks, chunks[1:]):
        assert prev.meta.end_word - nxt.meta.start_word == overlap
    assert chunks[-1].meta.end_word == n_words


def test_every_call_starts_ids_at_zero():
    first = chunk_text(_words(30), 10, 2)
    second = chunk_text(_words(30), 10, 2)
    assert first[0].id == second[0].id == 0
    assert first == second


@pytest.mark.parametrize("size,overlap", [(5, 5), (5, 6), (0, 0), (-1, 0), (5, -1)])
def test_invalid_window_is_rejected(size, overlap):
    with pytest.raises(PreconditionError):
        chunk_text(_words(20), size, overlap)


def test_chunks_are_immutable():
    chunk = chunk_text("one two", 2, 0)[0]
    with pytest.raises(AttributeError):
        chunk.text = "changed"
