"""
documents.py
------------

Helpers for loading plain-text documents from disk.

The workbench only ever sees text.  Extracting text from PDFs or other
binary formats happens before this point; here we read ``.txt`` and
``.md`` files, skip the ones that are empty, and join everything into a
single string for the chunker.
"""

from __future__ import annotations

import logging
import pathlib
from dataclasses import dataclass
from typing import Iterable, List, Sequence, Union

logger = logging.getLogger(__name__)

DEFAULT_EXTENSIONS = (".txt", ".md")


@dataclass(frozen=True)
class Document:
    """A named piece of source text.

    Attributes
    ----------
    name : str
        Display name, usually the file name.
    text : str
        The full plain-text content.
    """

    name: str
    text: str


def _iter_files(root: pathlib.Path, extensions: Sequence[str]) -> Iterable[pathlib.Path]:
    if root.is_file():
        yield root
        return
    for path in sorted(root.rglob("*")):
        if path.is_file() and path.suffix.lower() in extensions:
            yield path


def load_documents(
    paths: Union[str, pathlib.Path, Sequence[Union[str, pathlib.Path]]],
    *,
    extensions: Sequence[str] = DEFAULT_EXTENSIONS,
    encoding: str = "utf-8",
) -> List[Document]:
    """Load documents from files and directories.

    Directories are walked recursively and only files whose suffix is in
    ``extensions`` are read; files named explicitly are always read.
    Files that are empty after stripping whitespace are skipped.

    Raises
    ------
    FileNotFoundError
        If one of ``paths`` does not exist.
    """
    if isinstance(paths, (str, pathlib.Path)):
        paths = [paths]
    docs: List[Document] = []
    for raw in paths:
        root = pathlib.Path(raw)
        if not root.exists():
            raise FileNotFoundError(f"Document path not found: {raw}")
        for path in _iter_files(root, tuple(e.lower() for e in extensions)):
            with open(path, "r", encoding=encoding, errors="ignore") as f:
                text = f.read().strip()
            if not text:
                logger.warning("Skipping empty document %s", path)
                continue
            docs.append(Document(name=path.name, text=text))
    logger.info("Loaded %d documents", len(docs))
    return docs


def combine_documents(documents: Iterable[Document]) -> str:
    """Join documents into one text, each under a ``[name]`` header."""
    return "\n\n".join(f"[{doc.name}]\n{doc.text}" for doc in documents).strip()
