from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass

from src.application.ports.cache_port import DocumentCachePort
from src.application.ports.fetch_port import (
    DocumentFetcherPort,
    EmptyBody,
    FetchOutcome,
    FetchSuccess,
    FetchTimeout,
    HttpFailure,
    TransportFailure,
)
from src.domain.chunking import DocChunker
from src.domain.errors import (
    ChunkingValidationError,
    ConnectionTerminatedError,
    DocsLoadError,
    EmptyContentError,
    FetchTimeoutError,
    HttpError,
    RetriesExhaustedError,
    UnknownDomainError,
)
from src.domain.sources import get_source

log = logging.getLogger(__name__)

FETCH_TIMEOUT_SECONDS = 30.0
VALIDATION_PREFIX_CHARS = 10_000
LARGE_DOCUMENT_BYTES = 5 * 1024 * 1024

# Failures that are unlikely to clear up on an immediate retry
_FAIL_FAST = (FetchTimeoutError, ConnectionTerminatedError)


@dataclass(frozen=True)
class LoadResult:
    domain: str
    success: bool
    error: Exception | None = None


def raise_for_outcome(domain: str, outcome: FetchOutcome) -> str:
    """Narrow a fetch outcome to its content or the matching load error."""
    if isinstance(outcome, FetchSuccess):
        return outcome.content
    if isinstance(outcome, FetchTimeout):
        raise FetchTimeoutError(domain, outcome.timeout)
    if isinstance(outcome, HttpFailure):
        raise HttpError(domain, outcome.status, outcome.reason)
    if isinstance(outcome, EmptyBody):
        raise EmptyContentError(domain)
    if isinstance(outcome, TransportFailure):
        if outcome.terminated:
            raise ConnectionTerminatedError(domain, outcome.reason)
        raise DocsLoadError(domain, outcome.reason)
    raise TypeError(f"Unexpected fetch outcome: {outcome!r}")


class DocLoader:
    """Fetch, validate and cache documentation for registered domains."""

    def __init__(
        self,
        fetcher: DocumentFetcherPort,
        cache: DocumentCachePort,
        chunker: DocChunker,
        *,
        timeout: float = FETCH_TIMEOUT_SECONDS,
        max_retries: int = 2,
        debug: bool = False,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.fetcher = fetcher
        self.cache = cache
        self.chunker = chunker
        self.timeout = timeout
        self.max_retries = max_retries
        self.debug = debug
        self._sleep = sleep

    async def load(self, domain: str) -> None:
        source = get_source(domain)
        outcome = await self.fetcher.fetch(source.url, timeout=self.timeout)
        content = raise_for_outcome(domain, outcome)

        size_mb = len(content) / (1024 * 1024)
        if self.debug and len(content) > LARGE_DOCUMENT_BYTES:
            log.warning("Large documentation file for %s: %.2fMB", domain, size_mb)

        self._validate_chunkable(domain, content)
        self.cache.put(domain, content)

        if self.debug:
            chunk_count = len(self.chunker.chunk(domain, content))
            log.info("Loaded %s: %d chunks from %.2fMB", domain, chunk_count, size_mb)

    def _validate_chunkable(self, domain: str, content: str) -> None:
        try:
            sample = self.chunker.chunk(domain, content[:VALIDATION_PREFIX_CHARS])
        except Exception as e:  # noqa: BLE001 - any chunker fault marks the source corrupt
            raise ChunkingValidationError(domain, str(e) or type(e).__name__) from e
        if not sample:
            raise ChunkingValidationError(domain, "Content chunking produced no results")

    async def load_with_retry(self, domain: str, max_retries: int | None = None) -> None:
        retries = self.max_retries if max_retries is None else max(0, int(max_retries))
        last_error: DocsLoadError | None = None
        attempts = 0
        for attempt in range(retries + 1):
            attempts = attempt + 1
            try:
                await self.load(domain)
                return
            except UnknownDomainError:
                raise
            except DocsLoadError as e:
                last_error = e
                if attempt >= retries or isinstance(e, _FAIL_FAST):
                    break
                delay = 2**attempt
                log.debug("Retrying %s in %ss after: %s", domain, delay, e)
                await self._sleep(delay)

        assert last_error is not None
        raise RetriesExhaustedError(domain, attempts, last_error) from last_error

    async def ensure_loaded(self, domains: Iterable[str]) -> list[LoadResult]:
        """Load every non-fresh domain concurrently; failures are returned, not raised."""
        pending = [d for d in dict.fromkeys(domains) if not self.cache.is_fresh(d)]
        if not pending:
            return []

        results = await asyncio.gather(*(self._settle(d) for d in pending))
        for r in results:
            if not r.success:
                msg = str(r.error) if r.error else "Unknown error"
                if self.debug:
                    log.warning("Failed to load %s: %s", r.domain, msg)
                else:
                    log.debug("Failed to load %s: %s", r.domain, msg)
        return list(results)

    async def _settle(self, domain: str) -> LoadResult:
        try:
            await self.load_with_retry(domain)
        except Exception as e:  # noqa: BLE001 - one domain must not sink the batch
            return LoadResult(domain=domain, success=False, error=e)
        return LoadResult(domain=domain, success=True)
