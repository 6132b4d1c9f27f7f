"""
errors.py
---------

Exceptions raised by the workbench.  There are only two kinds of
failure the engine itself reports: a violated precondition (bad
arguments, an index searched before it was built) and a failed
completion request.  Errors raised by embedding providers are not
wrapped; they reach the caller unchanged.
"""

from __future__ import annotations


class WorkbenchError(Exception):
    """Base class for all errors raised by :mod:`rag_workbench`."""


class PreconditionError(WorkbenchError, ValueError):
    """A call was made with arguments or in a state it does not accept."""


class IndexNotBuiltError(PreconditionError):
    """An index was searched before :meth:`build` completed."""

    def __init__(self, index_name: str) -> None:
        super().__init__(f"{index_name} not built; call build() first")
        self.index_name = index_name


class CompletionError(WorkbenchError):
    """The chat completion endpoint could not be reached or returned an error."""


def require_positive(name: str, value: int) -> int:
    """Return ``value`` if it is a positive integer, else raise :class:`PreconditionError`."""
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise PreconditionError(f"{name} must be a positive integer, got {value!r}")
    return value
