from .load_docs import DocLoader, LoadResult
from .query_docs import DocsQueryUseCase, DocsSearchResponse, SearchStrategy

__all__ = [
    "DocLoader",
    "LoadResult",
    "DocsQueryUseCase",
    "DocsSearchResponse",
    "SearchStrategy",
]
