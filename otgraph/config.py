"""Configuration helpers for loading environment variables.

This module ensures that variables defined in a project-level ``.env`` file
are loaded before attempting to access them.  Consumers should rely on the
``get_env`` helper instead of using :func:`os.getenv` directly so that the
configuration is loaded in a single, well-defined place.

Recognised keys:

``OTGRAPH_LOG_LEVEL``
    Level applied to the ``otgraph`` logger by :func:`configure_logging`.
``OTGRAPH_ATOMIC_APPLY``
    Default for :meth:`otgraph.graph.store.GraphStore.apply`; when true a
    failing delta sequence restores the graph to its pre-call state.
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@lru_cache(maxsize=1)
def _load_environment() -> None:
    """Load environment variables from the project's ``.env`` file.

    The loader first attempts to read ``.env`` from the repository root.  If the
    file does not exist we still call :func:`load_dotenv` to allow the default
    discovery mechanism to run (e.g., for users who store the file elsewhere).
    Subsequent calls are cached so the file is only read once per process.
    """

    project_root = Path(__file__).resolve().parents[1]
    env_path = project_root / ".env"

    if env_path.exists():
        load_dotenv(env_path, override=False)
    else:
        load_dotenv(override=False)


def get_env(key: str, default: Optional[str] = None) -> Optional[str]:
    """Return the value for ``key`` from the environment.

    Parameters
    ----------
    key:
        The name of the environment variable to look up.
    default:
        The value to return when ``key`` is not present.
    """

    _load_environment()
    return os.environ.get(key, default)


def get_bool(key: str, default: bool = False) -> bool:
    """Return ``key`` interpreted as a boolean flag."""

    value = get_env(key)
    if value is None:
        return default
    normalised = value.strip().lower()
    if normalised in _TRUE_VALUES:
        return True
    if normalised in _FALSE_VALUES:
        return False
    raise ValueError(f"Invalid boolean value for {key}: {value!r}")


def configure_logging(level: str | int | None = None) -> logging.Logger:
    """Apply ``level`` (or ``OTGRAPH_LOG_LEVEL``) to the package logger."""

    if level is None:
        level = get_env("OTGRAPH_LOG_LEVEL", "WARNING")
    if isinstance(level, str):
        level = level.upper()
    logger = logging.getLogger("otgraph")
    logger.setLevel(level)
    return logger


__all__ = ["configure_logging", "get_bool", "get_env"]
