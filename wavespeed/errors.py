"""
Error taxonomy for the WaveSpeed client.

- ConfigurationError: the client cannot be constructed (missing API key, bad settings).
- APIError and subclasses: the service answered, but not with what the operation needs.
  They carry the HTTP status and the raw response body for diagnosis.

Transport failures (timeouts, connection errors) that outlive the retry budget are
re-raised unchanged, so callers see ``asyncio.TimeoutError`` or ``httpx.TransportError``.
"""

from __future__ import annotations

from typing import Any


class WaveSpeedError(Exception):
    """Base exception for all WaveSpeed client errors."""

    def __init__(
        self,
        message: str,
        *,
        http_status: int | None = None,
        body: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.http_status = http_status
        self.body = body

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "http_status": self.http_status,
            "body": self.body,
        }


class ConfigurationError(WaveSpeedError):
    """Client settings are missing or invalid. Raised before any network activity."""


class APIError(WaveSpeedError):
    """The service rejected a request or returned a body that could not be used."""

    action = "Request failed"

    def __init__(
        self,
        http_status: int | None = None,
        body: str | None = None,
        *,
        message: str | None = None,
    ):
        super().__init__(
            message or f"{self.action}: {http_status} {body}",
            http_status=http_status,
            body=body,
        )


class PredictionCreateError(APIError):
    action = "Failed to create prediction"


class PredictionReloadError(APIError):
    action = "Failed to reload prediction"


class UploadError(APIError):
    action = "Failed to upload file"


__all__ = [
    "WaveSpeedError",
    "ConfigurationError",
    "APIError",
    "PredictionCreateError",
    "PredictionReloadError",
    "UploadError",
]
