from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Union


@dataclass(frozen=True)
class FetchSuccess:
    content: str


@dataclass(frozen=True)
class FetchTimeout:
    timeout: float


@dataclass(frozen=True)
class HttpFailure:
    status: int
    reason: str = ""


@dataclass(frozen=True)
class EmptyBody:
    pass


@dataclass(frozen=True)
class TransportFailure:
    """Network-level failure; ``terminated`` marks a connection closed mid-request."""

    reason: str
    terminated: bool = False


FetchOutcome = Union[FetchSuccess, FetchTimeout, HttpFailure, EmptyBody, TransportFailure]


class DocumentFetcherPort(Protocol):
    """Fetch a text document; every failure mode is returned, never raised."""

    async def fetch(self, url: str, *, timeout: float) -> FetchOutcome:  # pragma: no cover
        ...
