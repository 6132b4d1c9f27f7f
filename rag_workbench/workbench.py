"""
workbench.py
------------

High level interface tying the pieces together: load documents, chunk
them, build the indexes the configured retrieval type needs, retrieve,
assemble context and ask a chat model for a grounded answer.

Every step checks that the previous one has happened and raises
:class:`~rag_workbench.errors.PreconditionError` with a short message
otherwise ("Create chunks first", "Build index first", ...).  If you
only need the engine, use :mod:`rag_workbench.chunking`,
:mod:`rag_workbench.keyword_index`, :mod:`rag_workbench.vector_index`,
:mod:`rag_workbench.rrf` and :mod:`rag_workbench.context` directly.
"""

from __future__ import annotations

import logging
import pathlib
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Sequence, Union

from .chunking import chunk_text
from .context import build_context
from .documents import Document, combine_documents, load_documents
from .errors import PreconditionError
from .keyword_index import KeywordIndex
from .llm import run_completion
from .models import Chunk, RetrievalResult
from .prompts import build_system_prompt, build_user_prompt
from .recipe import export_recipe, load_recipe, save_recipe
from .rrf import rrf_fuse
from .settings import LLMSettings, RetrievalSettings
from .vector_index import ProgressCallback, VectorIndex

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Answer:
    """A model reply together with the prompt and evidence behind it."""

    text: str
    system_prompt: str
    user_prompt: str
    results: List[RetrievalResult]

    @property
    def prompt_preview(self) -> str:
        return f"SYSTEM:\n{self.system_prompt}\n\nUSER:\n{self.user_prompt}"


class Workbench:
    """Stateful retrieval-augmented generation session.

    Parameters
    ----------
    settings : RetrievalSettings, optional
        Chunking and retrieval configuration.  Defaults to
        :class:`RetrievalSettings` defaults.
    embedder : object, optional
        Embedding provider used when the retrieval type needs a vector
        index.  It can also be passed to :meth:`build_index`.
    """

    def __init__(
        self,
        settings: Optional[RetrievalSettings] = None,
        *,
        embedder: Any = None,
    ) -> None:
        self.settings = settings or RetrievalSettings()
        self.embedder = embedder
        self.documents: List[Document] = []
        self.chunks: List[Chunk] = []
        self.keyword_index: Optional[KeywordIndex] = None
        self.vector_index: Optional[VectorIndex] = None
        self.last_retrieval: List[RetrievalResult] = []

    @classmethod
    def from_directory(
        cls,
        data_dir: Union[str, pathlib.Path],
        settings: Optional[RetrievalSettings] = None,
        *,
        embedder: Any = None,
    ) -> "Workbench":
        """Load every text document under ``data_dir`` and chunk it."""
        workbench = cls(settings, embedder=embedder)
        workbench.add_documents(load_documents(data_dir))
        workbench.chunk()
        return workbench

    @classmethod
    def from_recipe(
        cls,
        source: Union[str, pathlib.Path, Mapping[str, Any]],
        *,
        embedder: Any = None,
    ) -> "Workbench":
        """Restore settings and chunks from a recipe; rebuilds the keyword index only."""
        settings, chunks = load_recipe(source)
        workbench = cls(settings, embedder=embedder)
        workbench.chunks = chunks
        workbench.keyword_index = KeywordIndex(chunks).build()
        logger.info("Imported %d chunks; keyword index rebuilt", len(chunks))
        return workbench

    # ------------------------------------------------------------------
    # documents and chunks

    @property
    def raw_text(self) -> str:
        return combine_documents(self.documents)

    def add_documents(self, documents: Sequence[Document]) -> None:
        self.documents.extend(documents)

    def clear(self) -> None:
        self.documents = []
        self.chunks = []
        self.reset_index()

    def configure(self, **changes: Any) -> RetrievalSettings:
        """Replace settings fields; invalid values leave the settings untouched."""
        self.settings = self.settings.replace(**changes)
        return self.settings

    def chunk(self) -> List[Chunk]:
        """Chunk the loaded documents; any existing index is discarded."""
        if not self.documents:
            raise PreconditionError("Load documents first")
        self.chunks = chunk_text(
            self.raw_text,
            chunk_size_words=self.settings.chunk_size_words,
            overlap_words=self.settings.overlap_words,
        )
        self.reset_index()
        logger.info(
            "Chunks: %d. Chunk size: %d words. Overlap: %d words.",
            len(self.chunks), self.settings.chunk_size_words, self.settings.overlap_words,
        )
        return self.chunks

    # ------------------------------------------------------------------
    # indexing

    def reset_index(self) -> None:
        self.keyword_index = None
        self.vector_index = None
        self.last_retrieval = []

    async def build_index(
        self,
        embedder: Any = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> None:
        """Build the keyword index, plus the vector index for vector/hybrid retrieval.

        If embedding fails the keyword index is kept, the vector index
        is dropped and the provider's exception propagates.
        """
        if not self.chunks:
            raise PreconditionError("Create chunks first")
        self.last_retrieval = []
        self.keyword_index = KeywordIndex(self.chunks).build()
        self.vector_index = None
        if not self.settings.uses_vectors:
            return
        vector_index = VectorIndex(self.chunks, embedder or self.embedder)
        try:
            await vector_index.build(on_progress=on_progress)
        except Exception as exc:
            logger.error("Index build failed (try keyword mode): %s", exc)
            raise
        self.vector_index = vector_index

    # ------------------------------------------------------------------
    # retrieval and answering

    async def retrieve(self, question: str, top_k: Optional[int] = None) -> List[RetrievalResult]:
        """Retrieve chunks for ``question`` with the configured retrieval type."""
        question = question.strip()
        if not question:
            raise PreconditionError("Enter a question")
        if self.keyword_index is None:
            raise PreconditionError("Build index first")
        top_k = self.settings.top_k if top_k is None else top_k
        retrieval_type = self.settings.retrieval_type

        if retrieval_type == "keyword":
            results = self.keyword_index.search(question, top_k)
        else:
            if self.vector_index is None:
                raise PreconditionError("Vector index not available")
            if retrieval_type == "vector":
                results = await self.vector_index.search(question, top_k)
            else:
                depth = max(top_k, self.settings.candidate_k)
                keyword_results = self.keyword_index.search(question, depth)
                vector_results = await self.vector_index.search(question, depth)
                results = rrf_fuse(keyword_results, vector_results, top_k, self.settings.rrf_k)

        self.last_retrieval = results
        logger.debug("Retrieved %d chunks via %s", len(results), retrieval_type)
        return results

    def context(self, results: Optional[Sequence[RetrievalResult]] = None) -> str:
        """Context string for ``results`` (default: the last retrieval)."""
        if results is None:
            results = self.last_retrieval
        return build_context(results, self.settings.max_context_chars)

    async def answer(
        self,
        question: str,
        llm_settings: Optional[LLMSettings] = None,
        *,
        client: Any = None,
    ) -> Answer:
        """Ask the chat model to answer ``question`` from the last retrieval."""
        question = question.strip()
        if not question:
            raise PreconditionError("Enter a question")
        if not self.last_retrieval:
            raise PreconditionError("Run retrieve first")
        llm_settings = llm_settings or LLMSettings()
        system = build_system_prompt(self.settings.cite_mode, self.settings.safe_mode)
        user = build_user_prompt(question, self.context())
        text = await run_completion(
            llm_settings,
            [{"role": "system", "content": system}, {"role": "user", "content": user}],
            client=client,
        )
        return Answer(text=text, system_prompt=system, user_prompt=user,
                      results=list(self.last_retrieval))

    # ------------------------------------------------------------------
    # recipes

    def export_recipe(self) -> dict:
        return export_recipe(self.settings, self.documents, self.chunks)

    def save_recipe(self, path: Union[str, pathlib.Path]) -> pathlib.Path:
        return save_recipe(path, self.settings, self.documents, self.chunks)
