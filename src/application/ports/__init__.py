from .cache_port import DocumentCachePort
from .fetch_port import (
    DocumentFetcherPort,
    EmptyBody,
    FetchOutcome,
    FetchSuccess,
    FetchTimeout,
    HttpFailure,
    TransportFailure,
)

__all__ = [
    "DocumentCachePort",
    "DocumentFetcherPort",
    "FetchOutcome",
    "FetchSuccess",
    "FetchTimeout",
    "HttpFailure",
    "EmptyBody",
    "TransportFailure",
]
