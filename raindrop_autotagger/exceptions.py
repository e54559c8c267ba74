"""Custom exceptions for the Raindrop auto-tagger."""

from __future__ import annotations


class AutoTagError(Exception):
    """Base exception for all auto-tagger errors."""


class ConfigError(AutoTagError):
    """Configuration is invalid or missing."""


class RaindropAPIError(AutoTagError):
    """Raindrop.io API could not be reached or returned an error."""

    def __init__(self, message: str, status_code: int | None = None, detail: str = ""):
        self.status_code = status_code
        self.detail = detail
        super().__init__(message)


class SuggestionError(RaindropAPIError):
    """The tag suggestion endpoint failed or returned an unexpected response."""
