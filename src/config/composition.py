"""Composition helpers building the documentation engine with configured adapters.

Keeps environment/settings handling out of the interface layer.
"""

from __future__ import annotations

import httpx

from src.application.ports.fetch_port import DocumentFetcherPort
from src.application.use_cases import DocLoader, DocsQueryUseCase
from src.domain.chunking import ChunkingConfig, DocChunker
from src.infra.cache.memory_cache import DocCache
from src.infra.fetch.httpx_fetcher import HttpxFetcher
from src.permaweb_kb.config import Settings, get_settings


def build_docs_use_case(
    settings: Settings | None = None,
    *,
    fetcher: DocumentFetcherPort | None = None,
    client: httpx.AsyncClient | None = None,
    cache: DocCache | None = None,
) -> DocsQueryUseCase:
    s = settings or get_settings()
    chunker = DocChunker(ChunkingConfig(chunk_size=int(s.chunk_size)))
    doc_cache = cache or DocCache(max_age=s.cache_max_age)
    loader = DocLoader(
        fetcher=fetcher or HttpxFetcher(client),
        cache=doc_cache,
        chunker=chunker,
        timeout=float(s.fetch_timeout_seconds),
        max_retries=int(s.max_retries),
        debug=bool(s.debug_mode),
    )
    return DocsQueryUseCase(
        loader=loader,
        cache=doc_cache,
        chunker=chunker,
        relevance_threshold=int(s.relevance_threshold),
        default_max_results=int(s.default_max_results),
        debug=bool(s.debug_mode),
    )


__all__ = ["build_docs_use_case"]
