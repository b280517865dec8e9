from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from src.domain.document import CachedDocument, CacheEntryStatus
from src.domain.sources import available_domains, get_source

log = logging.getLogger(__name__)

DEFAULT_MAX_AGE = timedelta(hours=24)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class DocCache:
    """In-memory document cache, one entry per registered domain.

    Lifecycle: construct once, populate through the loader (preload or query),
    invalidate on demand. Writes replace the whole entry, so a concurrent reader
    sees either the previous or the new document, never a mix.
    """

    def __init__(
        self,
        max_age: timedelta = DEFAULT_MAX_AGE,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.max_age = max_age
        self._clock = clock
        self._entries: dict[str, CachedDocument] = {}

    def get(self, domain: str) -> CachedDocument | None:
        return self._entries.get(domain)

    def is_fresh(self, domain: str) -> bool:
        entry = self._entries.get(domain)
        if entry is None:
            return False
        return entry.age(self._clock()) < self.max_age

    def put(self, domain: str, content: str) -> CachedDocument:
        get_source(domain)  # reject ids outside the registry
        entry = CachedDocument(domain=domain, content=content, fetched_at=self._clock())
        self._entries[domain] = entry
        return entry

    def invalidate(self, domain: str | None = None) -> None:
        if domain is None:
            self._entries.clear()
            log.debug("Cleared all cached documentation")
        else:
            self._entries.pop(domain, None)
            log.debug("Cleared cached documentation for %s", domain)

    def status(self) -> dict[str, CacheEntryStatus]:
        now = self._clock()
        out: dict[str, CacheEntryStatus] = {}
        for domain in available_domains():
            entry = self._entries.get(domain)
            if entry is None:
                out[domain] = CacheEntryStatus(loaded=False)
            else:
                out[domain] = CacheEntryStatus(loaded=True, age=entry.age(now))
        return out
