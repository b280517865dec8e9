from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum

from src.application.ports.cache_port import DocumentCachePort
from src.application.use_cases.load_docs import DocLoader, LoadResult
from src.domain.chunking import DocChunker
from src.domain.detection import search_domains
from src.domain.document import (
    CacheEntryStatus,
    ResultFragment,
    estimate_response_tokens,
    estimate_tokens,
    extract_domains,
)
from src.domain.errors import UnknownDomainError
from src.domain.scoring import contains_query_word, expand_query, query_words, score_chunk
from src.domain.sources import available_domains, get_source, is_known_domain

log = logging.getLogger(__name__)

DEFAULT_MAX_RESULTS = 20
RELEVANCE_THRESHOLD = 2


class SearchStrategy(str, Enum):
    STANDARD = "standard"
    EXPANDED = "expanded"
    BROAD = "broad"
    RELAXED = "relaxed"


# Tried in this order; the first strategy with any result wins
STRATEGY_ORDER: tuple[SearchStrategy, ...] = (
    SearchStrategy.STANDARD,
    SearchStrategy.EXPANDED,
    SearchStrategy.BROAD,
    SearchStrategy.RELAXED,
)


@dataclass(frozen=True)
class StrategyPlan:
    strategy: SearchStrategy
    domains: list[str]
    query: str
    threshold: int
    relaxed: bool = False


@dataclass
class DocsSearchResponse:
    results: list[ResultFragment]
    strategy: SearchStrategy | None = None
    failed_domains: list[str] = field(default_factory=list)

    @property
    def sources(self) -> list[str]:
        return extract_domains(self.results)

    @property
    def total_results(self) -> int:
        return len(self.results)


@dataclass
class DocsQueryUseCase:
    """Public entry point of the documentation engine.

    Runs the standard, expanded, broad and relaxed strategies in order and
    returns the first non-empty, score-sorted result list. Network and content
    failures only shrink the result set; they never raise to the caller.
    """

    loader: DocLoader
    cache: DocumentCachePort
    chunker: DocChunker
    relevance_threshold: int = RELEVANCE_THRESHOLD
    default_max_results: int = DEFAULT_MAX_RESULTS
    debug: bool = False

    async def query(
        self,
        text: str,
        domains: Sequence[str] | None = None,
        max_results: int | None = None,
    ) -> list[ResultFragment]:
        response = await self.search(text, domains=domains, max_results=max_results)
        return response.results

    async def search(
        self,
        text: str,
        domains: Sequence[str] | None = None,
        max_results: int | None = None,
    ) -> DocsSearchResponse:
        requested = self._resolve_domains(domains)
        limit = self.default_max_results if max_results is None else int(max_results)
        if limit < 1:
            raise ValueError(f"max_results must be >= 1, got {max_results}")

        failed: dict[str, None] = {}
        for strategy in STRATEGY_ORDER:
            plan = self.plan(strategy, text, requested)
            results, load_results = await self._execute(plan, limit)
            for r in load_results:
                if not r.success:
                    failed.setdefault(r.domain, None)
            if results:
                return DocsSearchResponse(results, strategy, list(failed))
        return DocsSearchResponse([], None, list(failed))

    def plan(
        self, strategy: SearchStrategy, text: str, requested: Sequence[str] | None = None
    ) -> StrategyPlan:
        threshold = self.relevance_threshold
        if strategy is SearchStrategy.STANDARD:
            return StrategyPlan(strategy, search_domains(text, requested), text, threshold)
        if strategy is SearchStrategy.EXPANDED:
            return StrategyPlan(
                strategy, search_domains(text, requested), expand_query(text), threshold
            )
        if strategy is SearchStrategy.BROAD:
            return StrategyPlan(strategy, available_domains(), text, threshold)
        return StrategyPlan(
            strategy, available_domains(), text, max(1, threshold - 2), relaxed=True
        )

    async def _execute(
        self, plan: StrategyPlan, limit: int
    ) -> tuple[list[ResultFragment], list[LoadResult]]:
        if self.debug:
            log.info(
                "Trying %s search strategy with domains: %s",
                plan.strategy.value,
                ", ".join(plan.domains),
            )

        load_results = await self.loader.ensure_loaded(plan.domains)

        words = query_words(plan.query)
        results: list[ResultFragment] = []
        for domain in plan.domains:
            cached = self.cache.get(domain)
            if cached is None:
                continue
            if not self.cache.is_fresh(domain) and self.debug:
                log.info("Using potentially stale cached content for %s", domain)

            source = get_source(domain)
            for chunk in self.chunker.chunk(domain, cached.content):
                score = score_chunk(plan.query, chunk, source)
                if score < plan.threshold:
                    continue
                if not contains_query_word(words, chunk, relaxed=plan.relaxed):
                    continue
                results.append(
                    ResultFragment(
                        content=chunk,
                        domain=domain,
                        relevance_score=score,
                        url=source.url,
                    )
                )

        results.sort(key=lambda f: f.relevance_score, reverse=True)
        return results[:limit], load_results

    def _resolve_domains(self, domains: Sequence[str] | None) -> list[str] | None:
        """Keep the registered ids of a caller-supplied list, in order, without repeats.

        A non-empty list naming no registered domain is a caller error.
        """
        if not domains:
            return None
        known = [d for d in dict.fromkeys(domains) if is_known_domain(d)]
        if not known:
            raise UnknownDomainError(", ".join(domains))
        dropped = [d for d in domains if not is_known_domain(d)]
        if dropped:
            log.warning("Ignoring unknown documentation domains: %s", ", ".join(dropped))
        return known

    async def preload(self, domains: Sequence[str] | None = None) -> list[LoadResult]:
        targets = self._resolve_domains(domains) or available_domains()
        return await self.loader.ensure_loaded(targets)

    def clear_cache(self, domain: str | None = None) -> None:
        if domain is not None:
            get_source(domain)
        self.cache.invalidate(domain)

    def is_doc_loaded(self, domain: str) -> bool:
        get_source(domain)
        return self.cache.is_fresh(domain)

    def get_cache_status(self) -> dict[str, CacheEntryStatus]:
        return self.cache.status()

    def get_available_domains(self) -> list[str]:
        return available_domains()

    def estimate_tokens(self, text: str) -> int:
        return estimate_tokens(text)

    def estimate_response_tokens(self, fragments: Iterable[ResultFragment]) -> int:
        return estimate_response_tokens(fragments)
