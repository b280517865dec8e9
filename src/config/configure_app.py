"""Composition root: assemble and expose the documentation engine.

Provides a cached getter so long-lived processes (tool servers, CLI sessions)
share one engine and therefore one document cache.
"""

from __future__ import annotations

from functools import lru_cache

from src.application.use_cases import DocsQueryUseCase
from src.config.composition import build_docs_use_case


@lru_cache(maxsize=1)
def get_docs_use_case() -> DocsQueryUseCase:
    return build_docs_use_case()


def configure_app() -> DocsQueryUseCase:
    """Convenience alias returning the process-wide engine."""
    return get_docs_use_case()


__all__ = [
    "get_docs_use_case",
    "configure_app",
]
