from __future__ import annotations

from typing import Protocol

from src.domain.document import CachedDocument, CacheEntryStatus


class DocumentCachePort(Protocol):
    """Process-local store of one cached document per domain."""

    def is_fresh(self, domain: str) -> bool:  # pragma: no cover - interface
        ...

    def get(self, domain: str) -> CachedDocument | None:  # pragma: no cover - interface
        ...

    def put(self, domain: str, content: str) -> CachedDocument:  # pragma: no cover - interface
        ...

    def invalidate(self, domain: str | None = None) -> None:  # pragma: no cover - interface
        ...

    def status(self) -> dict[str, CacheEntryStatus]:  # pragma: no cover - interface
        ...
