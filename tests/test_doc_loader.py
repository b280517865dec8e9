from __future__ import annotations

import asyncio
import logging
from datetime import timedelta

import pytest

from src.application.ports.fetch_port import (
    EmptyBody,
    FetchOutcome,
    FetchSuccess,
    FetchTimeout,
    HttpFailure,
    TransportFailure,
)
from src.application.use_cases import DocLoader
from src.domain.errors import (
    ChunkingValidationError,
    ConnectionTerminatedError,
    EmptyContentError,
    FetchTimeoutError,
    HttpError,
    RetriesExhaustedError,
    UnknownDomainError,
)
from src.infra.cache.memory_cache import DocCache

AO_DOC = "AO processes\n---\nSpawn a process with aos\n---\nHandlers and messages"


@pytest.mark.asyncio
async def test_load_writes_through_to_cache(loader: DocLoader, fetcher, cache: DocCache) -> None:
    fetcher.set("ao", AO_DOC)
    await loader.load("ao")
    assert cache.get("ao").content == AO_DOC
    assert cache.is_fresh("ao")


@pytest.mark.asyncio
async def test_load_unknown_domain(loader: DocLoader) -> None:
    with pytest.raises(UnknownDomainError):
        await loader.load("not-a-domain")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("outcome", "error"),
    [
        (FetchTimeout(timeout=30.0), FetchTimeoutError),
        (HttpFailure(status=500, reason="Server Error"), HttpError),
        (EmptyBody(), EmptyContentError),
        (TransportFailure(reason="reset", terminated=True), ConnectionTerminatedError),
    ],
)
async def test_load_failures_leave_cache_untouched(
    loader: DocLoader, fetcher, cache: DocCache, outcome, error
) -> None:
    fetcher.set("ao", outcome)
    with pytest.raises(error):
        await loader.load("ao")
    assert cache.get("ao") is None


@pytest.mark.asyncio
async def test_timeout_error_carries_bound(loader: DocLoader, fetcher) -> None:
    fetcher.set("ao", FetchTimeout(timeout=30.0))
    with pytest.raises(FetchTimeoutError) as ei:
        await loader.load("ao")
    assert ei.value.timeout == 30.0
    assert isinstance(ei.value, TimeoutError)
    assert "timed out after 30s" in str(ei.value)


@pytest.mark.asyncio
async def test_http_error_carries_status(loader: DocLoader, fetcher) -> None:
    fetcher.set("ario", HttpFailure(status=404, reason="Not Found"))
    with pytest.raises(HttpError) as ei:
        await loader.load("ario")
    assert ei.value.status == 404
    assert ei.value.domain == "ario"


@pytest.mark.asyncio
async def test_unchunkable_content_is_discarded(loader: DocLoader, fetcher, cache) -> None:
    fetcher.set("arweave", "---\n----\n---")
    with pytest.raises(ChunkingValidationError):
        await loader.load("arweave")
    assert cache.get("arweave") is None


@pytest.mark.asyncio
async def test_failed_refresh_keeps_stale_entry(loader: DocLoader, fetcher, cache, clock) -> None:
    cache.put("ao", "old content")
    clock.advance(timedelta(hours=25))
    fetcher.set("ao", EmptyBody())
    with pytest.raises(EmptyContentError):
        await loader.load("ao")
    assert cache.get("ao").content == "old content"


@pytest.mark.asyncio
async def test_retry_backs_off_exponentially(loader: DocLoader, fetcher, sleep, cache) -> None:
    fetcher.set("wao", [HttpFailure(status=502), HttpFailure(status=502), FetchSuccess("wao\n---\ndocs")])
    await loader.load_with_retry("wao")
    assert fetcher.calls_for("wao") == 3
    assert sleep.delays == [1, 2]
    assert cache.is_fresh("wao")


@pytest.mark.asyncio
async def test_retry_exhaustion_wraps_last_error(loader: DocLoader, fetcher, sleep) -> None:
    fetcher.set("wao", HttpFailure(status=500))
    with pytest.raises(RetriesExhaustedError) as ei:
        await loader.load_with_retry("wao", max_retries=2)
    assert ei.value.attempts == 3
    assert isinstance(ei.value.last_error, HttpError)
    assert ei.value.__cause__ is ei.value.last_error
    assert "after 3 attempts" in str(ei.value)
    assert sleep.delays == [1, 2]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "outcome",
    [FetchTimeout(timeout=30.0), TransportFailure(reason="terminated", terminated=True)],
)
async def test_timeouts_and_terminations_fail_fast(loader: DocLoader, fetcher, sleep, outcome) -> None:
    fetcher.set("hyperbeam", outcome)
    with pytest.raises(RetriesExhaustedError) as ei:
        await loader.load_with_retry("hyperbeam")
    assert ei.value.attempts == 1
    assert fetcher.calls_for("hyperbeam") == 1
    assert sleep.delays == []


@pytest.mark.asyncio
async def test_retry_does_not_wrap_unknown_domain(loader: DocLoader) -> None:
    with pytest.raises(UnknownDomainError):
        await loader.load_with_retry("not-a-domain")


@pytest.mark.asyncio
async def test_ensure_loaded_isolates_failures(loader: DocLoader, fetcher, cache) -> None:
    fetcher.set("ao", FetchTimeout(timeout=30.0))
    fetcher.set("ario", "Gateways\n---\nArNS names")

    results = await loader.ensure_loaded(["ao", "ario"])

    by_domain = {r.domain: r for r in results}
    assert by_domain["ario"].success is True
    assert by_domain["ao"].success is False
    assert isinstance(by_domain["ao"].error, RetriesExhaustedError)
    assert cache.is_fresh("ario")
    assert cache.get("ao") is None


@pytest.mark.asyncio
async def test_ensure_loaded_skips_fresh_domains(loader: DocLoader, fetcher, cache) -> None:
    cache.put("ao", AO_DOC)
    results = await loader.ensure_loaded(["ao", "ao"])
    assert results == []
    assert fetcher.calls == []


@pytest.mark.asyncio
async def test_ensure_loaded_reloads_stale_domains(loader: DocLoader, fetcher, cache, clock) -> None:
    cache.put("ao", "old")
    clock.advance(timedelta(days=2))
    fetcher.set("ao", AO_DOC)
    results = await loader.ensure_loaded(["ao"])
    assert [r.success for r in results] == [True]
    assert cache.get("ao").content == AO_DOC


class InFlightFetcher:
    """Succeeds after a short pause and tracks how many fetches overlap."""

    def __init__(self) -> None:
        self.in_flight = 0
        self.peak = 0

    async def fetch(self, url: str, *, timeout: float) -> FetchOutcome:
        self.in_flight += 1
        self.peak = max(self.peak, self.in_flight)
        try:
            await asyncio.sleep(0.02)
        finally:
            self.in_flight -= 1
        return FetchSuccess(content=f"{url}\n---\ndocs")


@pytest.mark.asyncio
async def test_ensure_loaded_fetches_stale_domains_concurrently(cache, chunker, sleep) -> None:
    fetcher = InFlightFetcher()
    cache.put("ao", AO_DOC)
    loader = DocLoader(fetcher=fetcher, cache=cache, chunker=chunker, sleep=sleep)

    results = await loader.ensure_loaded(["ao", "ario", "wao", "hyperbeam"])

    assert fetcher.peak == 3
    assert fetcher.in_flight == 0
    assert sorted(r.domain for r in results) == ["ario", "hyperbeam", "wao"]
    assert all(r.success for r in results)


# --- Diagnostics -------------------------------------------------------------


def _debug_loader(fetcher, cache, chunker, sleep) -> DocLoader:
    return DocLoader(fetcher=fetcher, cache=cache, chunker=chunker, sleep=sleep, debug=True)


@pytest.mark.asyncio
async def test_failed_load_logs_warning_in_debug_mode(
    fetcher, cache, chunker, sleep, caplog: pytest.LogCaptureFixture
) -> None:
    caplog.set_level(logging.DEBUG)
    fetcher.set("ao", EmptyBody())

    await _debug_loader(fetcher, cache, chunker, sleep).ensure_loaded(["ao"])

    failures = [r for r in caplog.records if r.getMessage().startswith("Failed to load ao")]
    assert [r.levelno for r in failures] == [logging.WARNING]


@pytest.mark.asyncio
async def test_failed_load_logs_debug_outside_debug_mode(
    loader: DocLoader, fetcher, caplog: pytest.LogCaptureFixture
) -> None:
    caplog.set_level(logging.DEBUG)
    fetcher.set("ao", EmptyBody())

    await loader.ensure_loaded(["ao"])

    failures = [r for r in caplog.records if r.getMessage().startswith("Failed to load ao")]
    assert [r.levelno for r in failures] == [logging.DEBUG]


@pytest.mark.asyncio
async def test_large_document_warning_and_chunk_count(
    fetcher, cache, chunker, sleep, caplog: pytest.LogCaptureFixture
) -> None:
    caplog.set_level(logging.INFO)
    fetcher.set("arweave", "word " * 1_100_000)

    await _debug_loader(fetcher, cache, chunker, sleep).load("arweave")

    messages = [(r.levelno, r.getMessage()) for r in caplog.records]
    assert any(
        lvl == logging.WARNING and m.startswith("Large documentation file for arweave")
        for lvl, m in messages
    )
    assert any(
        lvl == logging.INFO and m.startswith("Loaded arweave:") for lvl, m in messages
    )


@pytest.mark.asyncio
async def test_no_diagnostics_outside_debug_mode(
    loader: DocLoader, fetcher, caplog: pytest.LogCaptureFixture
) -> None:
    caplog.set_level(logging.INFO)
    fetcher.set("arweave", "word " * 1_100_000)

    await loader.load("arweave")

    assert not [r for r in caplog.records if r.levelno >= logging.INFO]
