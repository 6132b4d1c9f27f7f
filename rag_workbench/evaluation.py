"""
evaluation.py
-------------

A quick citation check for generated answers.  It only verifies that
every ``[chunk:N]`` reference in an answer points at a chunk that was
actually retrieved; it does not judge whether the chunk supports the
claim.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Sequence

from .models import RetrievalResult

_CITATION = re.compile(r"\[chunk:(\d+)\]")


@dataclass
class CitationReport:
    cited: List[int] = field(default_factory=list)
    valid: List[int] = field(default_factory=list)
    invalid: List[int] = field(default_factory=list)

    def summary(self) -> str:
        return (
            f"Citations found: {len(self.cited)}\n"
            f"Valid citations (in retrieved set): {len(self.valid)} -> "
            f"{', '.join(map(str, self.valid)) or '(none)'}\n"
            f"Invalid citations: {len(self.invalid)} -> "
            f"{', '.join(map(str, self.invalid)) or '(none)'}"
        )


def extract_citations(answer: str) -> List[int]:
    """Unique chunk ids cited in ``answer``, in order of first citation."""
    return list(dict.fromkeys(int(m) for m in _CITATION.findall(answer)))


def check_citations(answer: str, results: Sequence[RetrievalResult]) -> CitationReport:
    cited = extract_citations(answer)
    retrieved = {item.chunk.id for item in results}
    return CitationReport(
        cited=cited,
        valid=[cid for cid in cited if cid in retrieved],
        invalid=[cid for cid in cited if cid not in retrieved],
    )
