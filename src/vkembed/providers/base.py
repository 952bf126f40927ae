"""
vkembed.providers.base - Abstract base class for video metadata providers.

A provider answers one question: given a VideoReference, what does the
video host know about it? The answer is a LookupOutcome. Providers perform
exactly one call per lookup and never retry.

Example:
    >>> class StaticProvider(MetadataProvider):
    ...     @property
    ...     def name(self) -> str:
    ...         return "static"
    ...     def is_available(self) -> bool:
    ...         return True
    ...     async def fetch_metadata(self, reference):
    ...         return LookupOutcome.success([])
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from vkembed.models.video_reference import VideoReference
    from vkembed.providers.types import LookupOutcome


class MetadataProvider(ABC):
    """Abstract base class for video metadata providers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Short provider name used in logs."""
        ...

    @abstractmethod
    def is_available(self) -> bool:
        """Check if provider is configured and ready.

        Should be fast and must not perform network calls.
        """
        ...

    @abstractmethod
    async def fetch_metadata(self, reference: VideoReference) -> LookupOutcome:
        """Look up metadata for a video.

        Args:
            reference: Resolved video identity; its lookup_key is sent upstream.

        Returns:
            LookupOutcome with either an API error or zero or more records.

        Raises:
            ProviderTransportError: If the provider could not be reached or
                returned an undecodable response.
        """
        ...

    async def aclose(self) -> None:
        """Release network resources. Default is a no-op."""
        return None
