from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta

# Rough estimate: 4 characters per token
TOKENS_PER_CHAR = 0.25


@dataclass(frozen=True)
class CachedDocument:
    """Raw content of one domain's document and when it was fetched.

    Entries are replaced whole on every successful fetch, never edited.
    """

    domain: str
    content: str
    fetched_at: datetime

    def age(self, now: datetime) -> timedelta:
        return now - self.fetched_at


@dataclass(frozen=True)
class ResultFragment:
    content: str
    domain: str
    relevance_score: float
    url: str
    is_full_document: bool = False


@dataclass(frozen=True)
class CacheEntryStatus:
    loaded: bool
    age: timedelta | None = None


def estimate_tokens(text: str) -> int:
    return math.ceil(len(text or "") * TOKENS_PER_CHAR)


def estimate_response_tokens(fragments: Iterable[ResultFragment]) -> int:
    return sum(estimate_tokens(f.content) for f in fragments)


def extract_domains(fragments: Iterable[ResultFragment]) -> list[str]:
    """Distinct domains of the fragments in first-seen order."""
    seen: dict[str, None] = {}
    for f in fragments:
        seen.setdefault(f.domain, None)
    return list(seen)
