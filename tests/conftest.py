from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from src.application.ports.fetch_port import FetchOutcome, FetchSuccess, HttpFailure
from src.application.use_cases import DocLoader, DocsQueryUseCase
from src.domain.chunking import ChunkingConfig, DocChunker
from src.domain.sources import get_source
from src.infra.cache.memory_cache import DocCache

# --- Fakes -------------------------------------------------------------------


class FakeClock:
    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now = self.now + delta


class FakeFetcher:
    """Serves canned outcomes per domain; unknown URLs answer 404."""

    def __init__(self, outcomes: dict[str, FetchOutcome | str | list] | None = None) -> None:
        self._by_url: dict[str, list[FetchOutcome]] = {}
        self.calls: list[str] = []
        for domain, outcome in (outcomes or {}).items():
            self.set(domain, outcome)

    def set(self, domain: str, outcome: FetchOutcome | str | list) -> None:
        items = outcome if isinstance(outcome, list) else [outcome]
        self._by_url[get_source(domain).url] = [
            FetchSuccess(content=o) if isinstance(o, str) else o for o in items
        ]

    async def fetch(self, url: str, *, timeout: float) -> FetchOutcome:
        self.calls.append(url)
        queue = self._by_url.get(url)
        if not queue:
            return HttpFailure(status=404, reason="Not Found")
        # The last outcome repeats once the queue is drained
        return queue.pop(0) if len(queue) > 1 else queue[0]

    def calls_for(self, domain: str) -> int:
        return self.calls.count(get_source(domain).url)


class RecordingSleep:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


# --- Fixtures ----------------------------------------------------------------


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> DocCache:
    return DocCache(clock=clock)


@pytest.fixture
def chunker() -> DocChunker:
    return DocChunker(ChunkingConfig(chunk_size=2000))


@pytest.fixture
def fetcher() -> FakeFetcher:
    return FakeFetcher()


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def loader(
    fetcher: FakeFetcher, cache: DocCache, chunker: DocChunker, sleep: RecordingSleep
) -> DocLoader:
    return DocLoader(fetcher=fetcher, cache=cache, chunker=chunker, sleep=sleep)


@pytest.fixture
def engine(loader: DocLoader, cache: DocCache, chunker: DocChunker) -> DocsQueryUseCase:
    return DocsQueryUseCase(loader=loader, cache=cache, chunker=chunker)
