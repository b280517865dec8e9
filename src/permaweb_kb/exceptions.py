from __future__ import annotations


class ConfigurationError(Exception):
    """Raised for invalid or missing configuration."""
