from __future__ import annotations


class DocsError(Exception):
    """Base class for documentation engine errors."""


class UnknownDomainError(DocsError):
    """Raised when a domain id is not part of the source registry."""

    def __init__(self, domain: str) -> None:
        super().__init__(f"Unknown domain: {domain}")
        self.domain = domain


class DocsLoadError(DocsError):
    """Raised when a single domain's documentation could not be loaded."""

    def __init__(self, domain: str, message: str) -> None:
        super().__init__(f"Failed to load {domain} documentation: {message}")
        self.domain = domain


class FetchTimeoutError(DocsLoadError, TimeoutError):
    def __init__(self, domain: str, timeout: float) -> None:
        super().__init__(domain, f"Request timed out after {timeout:g}s")
        self.timeout = timeout


class HttpError(DocsLoadError):
    def __init__(self, domain: str, status: int, reason: str = "") -> None:
        super().__init__(domain, f"HTTP {status}: {reason}".rstrip(": "))
        self.status = status
        self.reason = reason


class EmptyContentError(DocsLoadError):
    def __init__(self, domain: str) -> None:
        super().__init__(domain, "Empty content received")


class ConnectionTerminatedError(DocsLoadError):
    """The remote end closed the connection mid-request; not worth an immediate retry."""

    def __init__(self, domain: str, reason: str = "") -> None:
        super().__init__(domain, f"Connection terminated {reason}".strip())
        self.reason = reason


class ChunkingValidationError(DocsLoadError):
    def __init__(self, domain: str, reason: str) -> None:
        super().__init__(domain, f"Content chunking failed: {reason}")
        self.reason = reason


class RetriesExhaustedError(DocsLoadError):
    def __init__(self, domain: str, attempts: int, last_error: Exception) -> None:
        DocsError.__init__(self, f"Failed to load {domain} after {attempts} attempts: {last_error}")
        self.domain = domain
        self.attempts = attempts
        self.last_error = last_error
