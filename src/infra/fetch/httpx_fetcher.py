from __future__ import annotations

import asyncio
import logging

import httpx

from src.application.ports.fetch_port import (
    EmptyBody,
    FetchOutcome,
    FetchSuccess,
    FetchTimeout,
    HttpFailure,
    TransportFailure,
)

log = logging.getLogger(__name__)

# Errors raised when the peer drops the connection in the middle of a response
_TERMINATED_ERRORS = (httpx.RemoteProtocolError, httpx.ReadError)


class HttpxFetcher:
    """Fetch llms.txt documents over HTTP(S) with httpx.

    Each call is bounded by its own timeout; expiry cancels only that request.
    A shared client may be injected (tests pass one built on ``httpx.MockTransport``);
    otherwise a short-lived client is opened per fetch.
    """

    def __init__(self, client: httpx.AsyncClient | None = None) -> None:
        self._client = client

    async def fetch(self, url: str, *, timeout: float) -> FetchOutcome:
        try:
            response = await asyncio.wait_for(self._get(url, timeout), timeout=timeout)
        except (asyncio.TimeoutError, httpx.TimeoutException):
            log.debug("Fetch of %s timed out after %ss", url, timeout)
            return FetchTimeout(timeout=timeout)
        except _TERMINATED_ERRORS as e:
            return TransportFailure(reason=str(e) or type(e).__name__, terminated=True)
        except httpx.HTTPError as e:
            return TransportFailure(reason=str(e) or type(e).__name__)

        if not response.is_success:
            return HttpFailure(status=response.status_code, reason=response.reason_phrase)

        content = response.text
        if not content or not content.strip():
            return EmptyBody()
        return FetchSuccess(content=content)

    async def _get(self, url: str, timeout: float) -> httpx.Response:
        if self._client is not None:
            return await self._client.get(url, timeout=timeout, follow_redirects=True)
        async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as client:
            return await client.get(url)
