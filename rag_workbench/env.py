"""Environment configuration helpers for the RAG workbench."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional, Union

from .errors import PreconditionError

_ENV_LOADED = False


def load_env(path: Optional[Union[str, Path]] = None, *, force: bool = False) -> bool:
    """Load KEY=VALUE pairs from a .env file into ``os.environ``.

    Values already present in the environment win over the file.  The
    file is read once per process unless ``force`` is set.  Returns
    ``True`` when a file was read.
    """
    global _ENV_LOADED
    if _ENV_LOADED and not force:
        return False
    candidate = Path(path) if path is not None else Path.cwd() / ".env"
    loaded = False
    try:
        with candidate.open("r", encoding="utf-8") as handle:
            for raw_line in handle:
                line = raw_line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                key, value = line.split("=", 1)
                key = key.strip()
                value = value.strip()
                if key.startswith("export "):
                    key = key[len("export "):].strip()
                if not key:
                    continue
                if len(value) >= 2 and value[0] == value[-1] and value[0] in {'"', "'"}:
                    value = value[1:-1]
                os.environ.setdefault(key, value)
        loaded = True
    except FileNotFoundError:
        pass
    except OSError:
        pass
    _ENV_LOADED = True
    return loaded


def env_int(name: str, default: int) -> int:
    """Read an integer environment variable, falling back to ``default``."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise PreconditionError(f"Environment variable {name} must be an integer, got {raw!r}") from exc


def env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise PreconditionError(f"Environment variable {name} must be a number, got {raw!r}") from exc


def env_str(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip()
