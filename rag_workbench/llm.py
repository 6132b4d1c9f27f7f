"""
llm.py
------

A small client for OpenAI-compatible chat completion endpoints.

In ``explain`` mode no request is made at all; the caller gets a short
explanation instead of a model answer.  This keeps the whole retrieval
pipeline usable without credentials.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

try:
    from openai import AsyncOpenAI  # type: ignore
    _OPENAI_AVAILABLE = True
except ImportError:  # pragma: no cover
    AsyncOpenAI = None  # type: ignore
    _OPENAI_AVAILABLE = False

from .errors import CompletionError
from .settings import LLMSettings

logger = logging.getLogger(__name__)

Message = Dict[str, str]

EXPLAIN_ONLY_NOTICE = "Explain-only mode is active. No API calls are made."


def _base_url(endpoint: str) -> str:
    # accept either an API base URL or the full chat completions URL
    url = endpoint.rstrip("/")
    suffix = "/chat/completions"
    if url.endswith(suffix):
        url = url[: -len(suffix)]
    return url


def make_client(settings: LLMSettings) -> Any:
    """Create an ``AsyncOpenAI`` client for ``settings.endpoint``."""
    if not _OPENAI_AVAILABLE or AsyncOpenAI is None:
        raise CompletionError("The openai package is not installed; cannot generate answers.")
    try:
        return AsyncOpenAI(api_key=settings.api_key, base_url=_base_url(settings.endpoint))
    except Exception as exc:  # pragma: no cover
        raise CompletionError(
            "Failed to initialise OpenAI client; check your configuration."
        ) from exc


def explain_only_reply(messages: List[Message]) -> str:
    user_msg = next((m.get("content", "") for m in messages if m.get("role") == "user"), "")
    return (
        "Explain-only mode:\n\n"
        "I can't call an LLM here, but your retrieval context is available above.\n"
        "Use it to answer the question manually, or enable an OpenAI-compatible endpoint.\n\n"
        "Question:\n" + user_msg
    )


async def run_completion(
    settings: LLMSettings,
    messages: List[Message],
    *,
    temperature: Optional[float] = None,
    top_p: Optional[float] = None,
    max_tokens: Optional[int] = None,
    client: Any = None,
) -> str:
    """Send ``messages`` to the chat endpoint and return the reply text.

    Sampling arguments default to the values in ``settings``.  Any
    failure of the request is raised as :class:`CompletionError`.  A
    client created here is closed before returning; an injected
    ``client`` is left open for the caller.
    """
    if settings.mode == "explain":
        return explain_only_reply(messages)
    sampling = {
        "temperature": settings.temperature if temperature is None else temperature,
        "top_p": settings.top_p if top_p is None else top_p,
        "max_tokens": settings.max_tokens if max_tokens is None else max_tokens,
    }
    if client is not None:
        return await _complete(client, settings.model, messages, sampling)
    async with make_client(settings) as owned:
        return await _complete(owned, settings.model, messages, sampling)


async def _complete(client: Any, model: str, messages: List[Message], sampling: Dict[str, Any]) -> str:
    try:
        response = await client.chat.completions.create(
            model=model,
            messages=messages,
            **sampling,
        )
    except Exception as exc:
        logger.error("Chat completion failed: %s", exc)
        raise CompletionError(f"LLM call failed: {str(exc)[:700]}") from exc
    if not response.choices:
        return "(no content)"
    choice = response.choices[0]
    if getattr(choice, "finish_reason", None) == "length":
        logger.warning(
            "Completion stopped because of max_tokens limit; consider increasing max_tokens."
        )
    content = choice.message.content
    return content if content is not None else "(no content)"


async def ping_llm(settings: LLMSettings, *, client: Any = None) -> str:
    """Smoke-test the endpoint with a tiny deterministic request."""
    if settings.mode == "explain":
        return EXPLAIN_ONLY_NOTICE
    reply = await run_completion(
        settings,
        [{"role": "user", "content": "Reply with: OK"}],
        temperature=0,
        max_tokens=16,
        client=client,
    )
    return reply.strip()
