"""Domain layer: pure types and logic (no I/O, no external libs).

Keep this layer free of side-effects. Define entities and small pure helpers only.
"""

from .chunking import ChunkingConfig, DocChunker
from .context import assemble_context
from .detection import detect_domains, search_domains
from .document import (
    CacheEntryStatus,
    CachedDocument,
    ResultFragment,
    estimate_response_tokens,
    estimate_tokens,
    extract_domains,
)
from .scoring import contains_query_word, expand_query, score_chunk
from .sources import DOC_SOURCES, SourceDescriptor, available_domains, get_source

__all__ = [
    "DOC_SOURCES",
    "SourceDescriptor",
    "available_domains",
    "get_source",
    "detect_domains",
    "search_domains",
    "DocChunker",
    "ChunkingConfig",
    "score_chunk",
    "contains_query_word",
    "expand_query",
    "CachedDocument",
    "ResultFragment",
    "CacheEntryStatus",
    "estimate_tokens",
    "estimate_response_tokens",
    "extract_domains",
    "assemble_context",
]
