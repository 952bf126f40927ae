"""
Custom exceptions for vkembed.

All vkembed exceptions inherit from VkEmbedError for easy catching. Each
error knows the HTTP status it maps to and how to render its JSON body.
"""

from __future__ import annotations

from typing import Any

ACCESS_KEY_HINT = (
    'For "Anyone with the link" videos, make sure to include the access_key '
    "or hash in the URL"
)


class VkEmbedError(Exception):
    """Base exception for all vkembed errors.

    Attributes:
        message: Human-readable error message
        status_code: HTTP status the error maps to
        details: Additional diagnostic information merged into the body
    """

    status_code: int = 500

    def __init__(
        self,
        message: str,
        *,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to the JSON error body returned to callers."""
        result: dict[str, Any] = {"error": self.message}
        result.update(self.details)
        return result


class MissingInputError(VkEmbedError):
    """The request did not supply a videoUrl."""

    status_code = 400

    def __init__(self, message: str = "Missing videoUrl parameter"):
        super().__init__(message)


class InvalidUrlFormatError(VkEmbedError):
    """The input does not match any known VK video URL shape."""

    status_code = 400

    def __init__(self, original_url: str, message: str = "Invalid VK video URL format"):
        super().__init__(message, details={"originalUrl": original_url})
        self.original_url = original_url


class ProviderRejectedError(VkEmbedError):
    """The metadata provider returned an error and no access key is known."""

    status_code = 400

    def __init__(
        self,
        message: str | None,
        *,
        error_code: int | str | None = None,
        hint: str = ACCESS_KEY_HINT,
    ):
        message = message or "VK API error"
        super().__init__(message, details={"errorCode": error_code, "hint": hint})
        self.error_code = error_code
        self.hint = hint


class VideoNotFoundError(VkEmbedError):
    """The metadata provider returned no records and no access key is known."""

    status_code = 404

    def __init__(self, message: str = "Video not found or not accessible"):
        super().__init__(message)


class ConfigurationMissingError(VkEmbedError):
    """The provider credential is not configured."""

    status_code = 500

    def __init__(self, message: str = "VK API not configured", *, setting: str | None = None):
        super().__init__(message)
        self.setting = setting


class InternalServiceError(VkEmbedError):
    """Unexpected failure while processing a request."""

    status_code = 500

    def __init__(self, details: str, message: str = "Internal server error"):
        super().__init__(message, details={"details": details})


class ProviderTransportError(InternalServiceError):
    """The metadata provider could not be reached or answered garbage.

    Raised for network failures, timeouts, non-2xx HTTP statuses and
    undecodable bodies. API-level error payloads are not transport errors.
    """

    def __init__(self, details: str, *, http_code: int | None = None):
        super().__init__(details)
        self.http_code = http_code
