from __future__ import annotations

from collections.abc import Iterable

from src.domain.sources import SourceDescriptor

RELAXED_PREFIX_LEN = 4
RELAXED_MIN_WORD_LEN = 3

# Related terms appended to a query for the expanded search strategy
QUERY_EXPANSIONS: dict[str, str] = {
    "ao": "ao computer autonomous objects processes",
    "architecture": "architecture design structure implementation",
    "ario": "ar.io gateway infrastructure hosting",
    "arweave": "arweave permaweb blockchain permanent storage",
    "benefits": "benefits advantages pros features capabilities",
    "codec": "codec encoding decoding tabm flat structured httpsig",
    "deployment": "deployment deploy hosting publishing",
    "development": "development dev building creating implementation",
    "devices": "devices codec hyperbeam wao modular computational",
    "encoding": "encoding decoding message codec tabm binary",
    "gateway": "gateway node infrastructure ar.io",
    "hashpath": "hashpath verification provenance chained hashes",
    "hyperbeam": "hyperbeam distributed computing wasm erlang",
    "migrate": "migrate migration move transition switch",
    "nif": "nif erlang native implemented functions wasm",
    "process": "process autonomous object computation",
    "testing": "testing framework in-memory ao unit emulation",
    "token": "token cryptocurrency digital asset pst",
    "wallet": "wallet arweave key management",
    "wao": "wao hyperbeam devices codec hashpath distributed computing",
}


def query_words(query: str) -> list[str]:
    return query.lower().split()


def score_chunk(query: str, chunk: str, source: SourceDescriptor) -> int:
    """Literal relevance of a chunk: 2 per query word found, 1 per source keyword found."""
    content = chunk.lower()
    score = 0
    for word in query_words(query):
        if word in content:
            score += 2
    for keyword in source.keywords.all():
        if keyword.lower() in content:
            score += 1
    return score


def contains_query_word(words: Iterable[str], chunk: str, *, relaxed: bool = False) -> bool:
    """True when any query word occurs in the chunk.

    Relaxed matching only looks for the first four characters of words that are
    at least three characters long.
    """
    content = chunk.lower()
    for word in words:
        needle = word
        if relaxed and len(word) >= RELAXED_MIN_WORD_LEN:
            needle = word[:RELAXED_PREFIX_LEN]
        if needle in content:
            return True
    return False


def expand_query(query: str) -> str:
    expanded = query
    for word in query_words(query):
        extra = QUERY_EXPANSIONS.get(word)
        if extra:
            expanded += " " + extra
    return expanded
