"""
RAG Workbench
=============

A small retrieval-augmented generation toolkit.  Documents are split
into overlapping word windows, indexed lexically (TF-IDF) and/or
semantically (embeddings), searched, and the best chunks are rendered
into a bounded context string for a language model.  Keyword and vector
rankings can be merged with Reciprocal Rank Fusion (RRF).

Modules
-------

- :mod:`chunking`: Overlapping word-window chunker.
- :mod:`keyword_index`: TF-IDF sparse vectors and cosine scoring.
- :mod:`vector_index`: Dense embeddings and cosine scoring.
- :mod:`embedding`: Embedding providers (OpenAI, feature hashing).
- :mod:`rrf`: Reciprocal Rank Fusion of ranked lists.
- :mod:`context`: Budgeted context assembly.
- :mod:`workbench`: A stateful session wiring all of the above together,
  plus prompting and answer generation.

Example
-------

>>> from rag_workbench import chunk_text, KeywordIndex, build_context
>>> chunks = chunk_text("apple banana apple cherry", 2, 0)
>>> index = KeywordIndex(chunks).build()
>>> [r.chunk.id for r in index.search("apple", top_k=2)]
[0, 1]
>>> context = build_context(index.search("apple"), max_chars=2000)
"""

from .chunking import chunk_text
from .context import build_context
from .documents import Document, load_documents
from .embedding import HashingEmbeddingModel, OpenAIEmbeddingModel, default_embedder
from .errors import CompletionError, IndexNotBuiltError, PreconditionError, WorkbenchError
from .keyword_index import KeywordIndex, tokenize
from .models import Chunk, ChunkMeta, RetrievalResult
from .rrf import reciprocal_rank_fusion, rrf_fuse
from .settings import LLMSettings, RetrievalSettings
from .sparse import SparseVector
from .vector_index import VectorIndex
from .workbench import Answer, Workbench

__version__ = "0.1.0"

__all__ = [
    "Answer",
    "Chunk",
    "ChunkMeta",
    "CompletionError",
    "Document",
    "HashingEmbeddingModel",
    "IndexNotBuiltError",
    "KeywordIndex",
    "LLMSettings",
    "OpenAIEmbeddingModel",
    "PreconditionError",
    "RetrievalResult",
    "RetrievalSettings",
    "SparseVector",
    "VectorIndex",
    "Workbench",
    "WorkbenchError",
    "build_context",
    "chunk_text",
    "default_embedder",
    "load_documents",
    "reciprocal_rank_fusion",
    "rrf_fuse",
    "tokenize",
]
