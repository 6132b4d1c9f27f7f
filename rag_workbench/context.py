"""
context.py
----------

Render ranked results into one bounded block of text for a prompt.
"""

from __future__ import annotations

from typing import Iterable

from .models import RetrievalResult

DEFAULT_MAX_CHARS = 8000


def format_block(item: RetrievalResult) -> str:
    """The labelled block for one result, with its leading blank line."""
    return f"\n\n[chunk:{item.chunk.id} score:{item.score:.4f}]\n{item.chunk.text}"


def build_context(results: Iterable[RetrievalResult], max_chars: int = DEFAULT_MAX_CHARS) -> str:
    """Concatenate result blocks in order while they fit in ``max_chars``.

    Blocks are never cut: the first block that would push the total
    past the budget ends the context, even if a later, shorter block
    would still fit.  The highest ranked evidence therefore always comes
    first and the result is never longer than ``max_chars``.
    """
    ctx = ""
    for item in results:
        block = format_block(item)
        if len(ctx) + len(block) > max_chars:
            break
        ctx += block
    return ctx.strip()
