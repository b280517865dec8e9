from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from src.domain.errors import UnknownDomainError

GLOSSARY_DOMAIN = "permaweb-glossary"


class DocumentLayout(str, Enum):
    """Structural format of a source document; selects the primary delimiter."""

    LLMS_TXT = "llms_txt"  # sections separated by '---' rules
    GLOSSARY = "glossary"  # entries separated by blank-line runs


@dataclass(frozen=True)
class KeywordTiers:
    primary: tuple[str, ...]
    secondary: tuple[str, ...]
    technical: tuple[str, ...]

    def weighted(self) -> list[tuple[str, int]]:
        """Keywords paired with their detection weight (primary=3, others=2)."""
        return (
            [(k, 3) for k in self.primary]
            + [(k, 2) for k in self.secondary]
            + [(k, 2) for k in self.technical]
        )

    def all(self) -> tuple[str, ...]:
        return self.primary + self.secondary + self.technical


@dataclass(frozen=True)
class SourceDescriptor:
    domain: str
    url: str
    description: str
    keywords: KeywordTiers
    layout: DocumentLayout = DocumentLayout.LLMS_TXT


DOC_SOURCES: tuple[SourceDescriptor, ...] = (
    SourceDescriptor(
        domain="arweave",
        url="https://fuel_permawebllms.permagate.io/arweave-llms.txt",
        description="Arweave ecosystem development guides",
        keywords=KeywordTiers(
            primary=(
                "arweave",
                "permaweb",
                "smartweave",
                "graphql",
                "transaction",
                "wallet",
                "bundling",
                "arfs",
                "arns",
            ),
            secondary=(
                "permanent",
                "storage",
                "blockchain",
                "decentralized",
                "ar",
                "winston",
                "pst",
                "profit sharing",
            ),
            technical=(
                "warp",
                "arweave-js",
                "ardrive",
                "arkb",
                "irys",
                "bundlr",
                "vouch",
                "smartweave contract",
            ),
        ),
    ),
    SourceDescriptor(
        domain="ao",
        url="https://fuel_permawebllms.permagate.io/ao-llms.txt",
        description="AO computer system documentation",
        keywords=KeywordTiers(
            primary=("ao", "process", "message", "lua", "aos", "spawn", "scheduler", "autonomous"),
            secondary=(
                "actor",
                "hyper parallel",
                "computing",
                "decentralized",
                "holographic",
                "supercomputer",
            ),
            technical=("aoconnect", "betteridea", "hyperbeam", "wasm", "module", "cron", "handler"),
        ),
    ),
    SourceDescriptor(
        domain="ario",
        url="https://fuel_permawebllms.permagate.io/ario-llms.txt",
        description="AR.IO ecosystem infrastructure",
        keywords=KeywordTiers(
            primary=("ar.io", "gateway", "arns", "wayfinder", "hosting", "deployment"),
            secondary=(
                "permaweb",
                "decentralized",
                "web3",
                "infrastructure",
                "indexing",
                "resolver",
            ),
            technical=(
                "deploy",
                "archive",
                "content",
                "protocol",
                "node",
                "self-hosted",
                "configuration",
            ),
        ),
    ),
    SourceDescriptor(
        domain="hyperbeam",
        url="https://fuel_permawebllms.permagate.io/hyperbeam-llms.txt",
        description="HyperBEAM decentralized computing implementation",
        keywords=KeywordTiers(
            primary=("hyperbeam", "device", "wasm", "erlang", "distributed", "computation"),
            secondary=(
                "concurrent",
                "fault tolerant",
                "scalable",
                "trustless",
                "verifiable",
                "modular",
            ),
            technical=(
                "tee",
                "trusted execution",
                "pipeline",
                "http api",
                "composable",
                "performance",
            ),
        ),
    ),
    SourceDescriptor(
        domain=GLOSSARY_DOMAIN,
        url="https://fuel_permawebllms.permagate.io/permaweb-glossary-llms.txt",
        description="Comprehensive Permaweb glossary",
        layout=DocumentLayout.GLOSSARY,
        keywords=KeywordTiers(
            primary=(
                "what is",
                "define",
                "definition",
                "explain",
                "glossary",
                "terminology",
                "meaning",
            ),
            secondary=("concept", "understand", "basic", "introduction", "overview", "guide"),
            technical=(
                "blockchain",
                "token",
                "economics",
                "cryptographic",
                "verification",
                "distributed",
            ),
        ),
    ),
    SourceDescriptor(
        domain="wao",
        url="https://permaweb-llm-fuel.vercel.app/wao-llms.txt",
        description="WAO documentation",
        keywords=KeywordTiers(
            primary=(
                "wao",
                "hyperbeam",
                "devices",
                "codec",
                "hashpath",
                "ao unit",
                "distributed computing",
                "message routing",
            ),
            secondary=(
                "encoding",
                "decoding",
                "tabm",
                "type annotated binary message",
                "testing framework",
                "in-memory",
                "verification",
                "provenance",
            ),
            technical=(
                "flat@1.0",
                "structured@1.0",
                "httpsig@1.0",
                "erlang",
                "wasm",
                "nif",
                "graphql",
                "javascript sdk",
                "memory forking",
                "custom device",
            ),
        ),
    ),
)

_BY_DOMAIN: dict[str, SourceDescriptor] = {s.domain: s for s in DOC_SOURCES}


def available_domains() -> list[str]:
    return [s.domain for s in DOC_SOURCES]


def is_known_domain(domain: str) -> bool:
    return domain in _BY_DOMAIN


def get_source(domain: str) -> SourceDescriptor:
    try:
        return _BY_DOMAIN[domain]
    except KeyError:
        raise UnknownDomainError(domain) from None
