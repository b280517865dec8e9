from __future__ import annotations

import re
from collections.abc import Sequence

from src.domain.sources import DOC_SOURCES, GLOSSARY_DOMAIN, SourceDescriptor

# A top score at or above this means at least one primary keyword matched
CONFIDENCE_THRESHOLD = 3.0
HIGH_CONFIDENCE_DOMAINS = 3
FUZZY_PREFIX_LEN = 3
FUZZY_WEIGHT = 0.3
BASE_SCORE = 0.1

_DEFINITION_RE = re.compile(r"what is|define|definition|glossary|meaning|explain", re.IGNORECASE)


def score_domain(query: str, source: SourceDescriptor) -> float:
    """Keyword affinity of a query for one source.

    Exact matches count the tier weight when the query contains the keyword or a
    query word is part of the keyword. Query words of three or more characters
    earn a reduced fuzzy bonus for every keyword containing their first three
    characters. Every source keeps a small base score.
    """
    q = query.lower()
    words = q.split()
    weighted = [(k.lower(), w) for k, w in source.keywords.weighted()]

    score = 0.0
    for keyword, weight in weighted:
        if keyword in q or any(word in keyword for word in words):
            score += weight

    for word in words:
        if len(word) < FUZZY_PREFIX_LEN:
            continue
        stem = word[:FUZZY_PREFIX_LEN]
        for keyword, weight in weighted:
            if stem in keyword:
                score += weight * FUZZY_WEIGHT

    return score + BASE_SCORE


def rank_domains(
    query: str, sources: Sequence[SourceDescriptor] = DOC_SOURCES
) -> list[tuple[str, float]]:
    scored = [(s.domain, score_domain(query, s)) for s in sources]
    # sorted() is stable: ties keep registry order
    return sorted(scored, key=lambda pair: pair[1], reverse=True)


def detect_domains(query: str, sources: Sequence[SourceDescriptor] = DOC_SOURCES) -> list[str]:
    """Rank every source for a query and size the list by confidence.

    High confidence narrows the search to the top three domains; otherwise all
    domains are returned in ranked order so recall wins over precision.
    """
    ranked = rank_domains(query, sources)
    if not ranked:
        return []
    max_score = max(score for _, score in ranked)
    domains = [domain for domain, _ in ranked]
    if max_score >= CONFIDENCE_THRESHOLD:
        return domains[:HIGH_CONFIDENCE_DOMAINS]
    return domains


def is_definition_query(query: str) -> bool:
    return _DEFINITION_RE.search(query) is not None


def search_domains(query: str, requested: Sequence[str] | None = None) -> list[str]:
    """Domains to search for a query: caller choice first, detection otherwise."""
    if requested:
        return list(requested)
    domains = detect_domains(query)
    if is_definition_query(query) and GLOSSARY_DOMAIN not in domains:
        domains.append(GLOSSARY_DOMAIN)
    return domains
